"""Configuration loading and management for design-diff.

Configuration sources are merged in priority order:
    1. Defaults (defined in DiffConfig)
    2. Global config (~/.design-diff.toml)
    3. Project config (./design-diff.toml)
    4. Explicit config file
    5. Environment variables (DESIGN_DIFF_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(max_depth=16)
    >>> config.max_depth
    16
    >>> config.token_identifier_field
    'uuid'
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

ENV_PREFIX = "DESIGN_DIFF_"


@dataclass(frozen=True)
class DiffConfig:
    """Field names and limits the engine works with.

    Attributes:
        Entry shape:
            token_identifier_field: Stable per-token id, survives renames
            definition_identifier_field: Stable per-definition id
            deprecated_field: Marker flagging an intentional removal
            deprecated_comment_field: Free-text note next to the marker
            schema_identity_field: Schema-level identity; changing it is breaking

        Differ:
            max_depth: Mappings nested deeper than this compare as opaque leaves

        Loading:
            file_pattern: Glob used to discover dataset files
            workers: Parallel loaders (one per dataset side is enough)
            git_timeout_seconds: Timeout for each git subprocess
    """

    # Entry shape
    token_identifier_field: str = "uuid"
    definition_identifier_field: str = "$id"
    deprecated_field: str = "deprecated"
    deprecated_comment_field: str = "deprecated_comment"
    schema_identity_field: str = "$schema"

    # Differ
    max_depth: int = 64

    # Loading
    file_pattern: str = "*.json"
    workers: int = 2
    git_timeout_seconds: int = 30

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for field_name in (
            "token_identifier_field",
            "definition_identifier_field",
            "deprecated_field",
            "schema_identity_field",
            "file_pattern",
        ):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value:
                raise InvalidConfigError(field_name, value, "must be a non-empty string")

        if self.max_depth < 1:
            raise InvalidConfigError("max_depth", self.max_depth, "must be at least 1")
        if self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.git_timeout_seconds < 1:
            raise InvalidConfigError(
                "git_timeout_seconds", self.git_timeout_seconds, "must be at least 1"
            )


DEFAULT_CONFIG = DiffConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> DiffConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); ``None``
            values are ignored so unset CLI options keep lower-priority values

    Returns:
        Validated DiffConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".design-diff.toml"
    if global_config.exists():
        merged.update(_read_config_file(global_config, "global config"))

    project_config = Path.cwd() / "design-diff.toml"
    if project_config.exists():
        merged.update(_read_config_file(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_read_config_file(config_file, "config file"))

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return DiffConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _read_config_file(path: Path, label: str) -> dict:
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")

    # Settings may live at the top level or under [design-diff]
    section = data.get("design-diff", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid {label} '{path}': [design-diff] must be a table")
    return dict(section)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from DESIGN_DIFF_* environment variables.

    Supported environment variables mirror the DiffConfig fields, e.g.
    DESIGN_DIFF_MAX_DEPTH, DESIGN_DIFF_TOKEN_IDENTIFIER_FIELD,
    DESIGN_DIFF_WORKERS.

    Returns:
        Dict of field_name -> parsed_value for any DESIGN_DIFF_* vars found.
    """
    type_hints = get_type_hints(DiffConfig)

    result: dict[str, Any] = {}

    for field_name in DiffConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is int:
            try:
                result[field_name] = int(env_value)
            except ValueError:
                raise InvalidConfigError(env_key, env_value, "expected an integer")
        else:
            result[field_name] = env_value

    return result


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    with open(path, "rb") as f:
        return tomllib.load(f)
