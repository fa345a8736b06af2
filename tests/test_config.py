"""Tests for configuration loading."""

import dataclasses

import pytest

from design_diff.config import DEFAULT_CONFIG, DiffConfig, load_config
from design_diff.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Keep user and project config files out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    for name in list(DiffConfig.__dataclass_fields__):
        monkeypatch.delenv(f"DESIGN_DIFF_{name.upper()}", raising=False)


class TestDiffConfig:
    def test_defaults(self):
        assert DEFAULT_CONFIG.token_identifier_field == "uuid"
        assert DEFAULT_CONFIG.definition_identifier_field == "$id"
        assert DEFAULT_CONFIG.max_depth == 64

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_depth": 0}, {"workers": 0}, {"git_timeout_seconds": 0}, {"deprecated_field": ""}],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfigError):
            DiffConfig(**kwargs)

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.max_depth = 3


class TestLoadConfig:
    def test_no_files(self):
        assert load_config() == DiffConfig()

    def test_project_file(self, tmp_path):
        (tmp_path / "design-diff.toml").write_text('token_identifier_field = "id"\n')
        assert load_config().token_identifier_field == "id"

    def test_section_table(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('[design-diff]\nmax_depth = 8\n')
        assert load_config(config_file=path).max_depth == 8

    def test_env_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.toml"
        path.write_text("max_depth = 8\n")
        monkeypatch.setenv("DESIGN_DIFF_MAX_DEPTH", "12")
        assert load_config(config_file=path).max_depth == 12

    def test_overrides_beat_env(self, monkeypatch):
        monkeypatch.setenv("DESIGN_DIFF_MAX_DEPTH", "12")
        assert load_config(max_depth=5).max_depth == 5
        assert load_config(max_depth=None).max_depth == 12

    def test_bad_env_int(self, monkeypatch):
        monkeypatch.setenv("DESIGN_DIFF_WORKERS", "many")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('colour = "blue"\n')
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(config_file=tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text("max_depth = = 3\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=path)
