"""Tests for the design-diff command line."""

import json

import pytest
from typer.testing import CliRunner

from design_diff import __version__
from design_diff.cli import app
from design_diff.cli.compare import BREAKING_EXIT_CODE

runner = CliRunner()


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run every command from an empty directory with no user config."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def schema_dirs(tmp_path, button_schema, breaking_button_schema, non_breaking_button_schema):
    dirs = {}
    for label, schema in (
        ("v1", button_schema),
        ("v2", non_breaking_button_schema),
        ("v3", breaking_button_schema),
    ):
        write_json(tmp_path / label / "button.json", schema)
        dirs[label] = str(tmp_path / label)
    return dirs


@pytest.fixture
def token_dirs(tmp_path, token_set):
    updated = dict(token_set)
    updated["corner-radius-small"] = updated.pop("corner-radius-100")
    write_json(tmp_path / "tokens-old" / "tokens.json", token_set)
    write_json(tmp_path / "tokens-new" / "tokens.json", updated)
    return str(tmp_path / "tokens-old"), str(tmp_path / "tokens-new")


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestComponentsCommand:
    def test_non_breaking_json(self, schema_dirs):
        result = runner.invoke(app, ["components", schema_dirs["v1"], schema_dirs["v2"], "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["summary"]["has_breaking_changes"] is False
        assert "button" in data["changes"]["updated"]["non_breaking"]

    def test_breaking_rich(self, schema_dirs):
        result = runner.invoke(app, ["components", schema_dirs["v1"], schema_dirs["v3"]])

        assert result.exit_code == 0, result.output
        assert "breaking change(s)" in result.stdout

    def test_fail_on_breaking(self, schema_dirs):
        result = runner.invoke(
            app, ["components", schema_dirs["v1"], schema_dirs["v3"], "--fail-on-breaking", "--json"]
        )
        assert result.exit_code == BREAKING_EXIT_CODE

    def test_fail_on_breaking_passes_when_clean(self, schema_dirs):
        result = runner.invoke(
            app, ["components", schema_dirs["v1"], schema_dirs["v2"], "--fail-on-breaking"]
        )
        assert result.exit_code == 0

    def test_breaking_only_and_output_file(self, schema_dirs, tmp_path):
        out = tmp_path / "report.json"
        result = runner.invoke(
            app,
            ["components", schema_dirs["v2"], schema_dirs["v3"], "--breaking-only", "--json", "-o", str(out)],
        )

        assert result.exit_code == 0, result.output
        saved = json.loads(out.read_text(encoding="utf-8"))
        assert saved["changes"]["updated"]["non_breaking"] == {}
        assert "button" in saved["changes"]["updated"]["breaking"]

    def test_missing_source_is_an_error(self, schema_dirs, tmp_path):
        result = runner.invoke(app, ["components", schema_dirs["v1"], str(tmp_path / "nowhere")])
        assert result.exit_code == 1

    def test_two_schema_files(self, tmp_path, button_schema, breaking_button_schema):
        write_json(tmp_path / "button-v1.json", button_schema)
        write_json(tmp_path / "button-v2.json", breaking_button_schema)
        result = runner.invoke(
            app, ["components", str(tmp_path / "button-v1.json"), str(tmp_path / "button-v2.json"), "--json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert list(data["changes"]["updated"]["breaking"]) == ["button-v2"]
        assert data["changes"]["added"] == {} and data["changes"]["deleted"] == {}

    def test_config_file(self, schema_dirs, tmp_path):
        config = tmp_path / "custom.toml"
        config.write_text("max_depth = 0\n")
        result = runner.invoke(
            app, ["components", schema_dirs["v1"], schema_dirs["v2"], "--config", str(config)]
        )
        assert result.exit_code == 1


class TestTokensCommand:
    def test_rename_json(self, token_dirs):
        old, new = token_dirs
        result = runner.invoke(app, ["tokens", old, new, "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["changes"]["renamed"]["corner-radius-small"]["old_name"] == "corner-radius-100"
        assert data["changes"]["deleted"] == {}

    def test_rich_output(self, token_dirs):
        old, new = token_dirs
        result = runner.invoke(app, ["tokens", old, new])

        assert result.exit_code == 0, result.output
        assert "TOKEN DIFF" in result.stdout

    def test_empty_git_ref(self, token_dirs):
        old, _ = token_dirs
        result = runner.invoke(app, ["tokens", old, "git:"])
        assert result.exit_code == 1


class TestResolveCommand:
    def test_resolve_alias(self, token_dirs):
        old, _ = token_dirs
        result = runner.invoke(app, ["resolve", old, "accent-color", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["value"] == "rgb(38, 128, 235)"
        assert data["chain"] == ["accent-color", "blue-500"]

    def test_resolve_all_clean(self, token_dirs):
        old, _ = token_dirs
        result = runner.invoke(app, ["resolve", old])

        assert result.exit_code == 0, result.output
        assert "resolve" in result.stdout

    def test_resolve_all_reports_broken_chains(self, tmp_path):
        write_json(tmp_path / "loop" / "tokens.json", {
            "a": {"value": "{b}"},
            "b": {"value": "{a}"},
        })
        result = runner.invoke(app, ["resolve", str(tmp_path / "loop"), "--json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert set(data["failures"]) == {"a", "b"}
        assert data["failures"]["a"]["error"] == "CircularReferenceError"

    def test_resolve_missing_target(self, tmp_path):
        write_json(tmp_path / "dangling" / "tokens.json", {"a": {"value": "{gone}"}})
        result = runner.invoke(app, ["resolve", str(tmp_path / "dangling"), "a"])
        assert result.exit_code == 1

    def test_resolve_all_checks_set_members(self, tmp_path):
        write_json(tmp_path / "sets" / "tokens.json", {
            "gray-50": {"value": "#fafafa"},
            "bg": {"sets": {"light": {"value": "{gray-50}"}, "dark": {"value": "{gone}"}}},
        })
        result = runner.invoke(app, ["resolve", str(tmp_path / "sets"), "--json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert list(data["failures"]) == ["bg"]
        assert data["failures"]["bg"]["error"] == "TargetNotFoundError"
