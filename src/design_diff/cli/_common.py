"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..api import open_source
from ..config import DiffConfig, load_config
from ..dataset.loader import DatasetSource

console = Console()

# Logs and errors stay off stdout so --json output can be piped
err_console = Console(stderr=True)


def resolve_config(config: Optional[Path] = None, **overrides) -> DiffConfig:
    """Build configuration from CLI options; None overrides are ignored."""
    return load_config(config_file=config, **overrides)


def parse_source(
    location: str,
    repo: Optional[Path],
    path: Optional[str],
    config: DiffConfig,
) -> DatasetSource:
    """Turn a positional SOURCE argument into a DatasetSource.

    ``git:<ref>`` reads ``--path`` inside ``--repo`` at that ref; anything
    else is a local directory (``--path`` is then relative to it) or file.
    """
    return open_source(location, repo=repo, subdir=path or "", config=config)
