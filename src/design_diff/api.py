"""Public API for design-diff.

Loads both sides of a comparison and hands them to the assembler. Callers
that already hold two Datasets can use ``design_diff.report`` directly.

Example:
    >>> from pathlib import Path
    >>> from design_diff import LocalSource, compare_definition_sources
    >>>
    >>> report = compare_definition_sources(
    ...     LocalSource(Path("schemas-v1")),
    ...     LocalSource(Path("schemas-v2")),
    ... )
    >>> report.has_breaking_changes
    False
"""

from pathlib import Path
from typing import Optional, Sequence, Union

from .config import DiffConfig, load_config
from .dataset.loader import DatasetSource, GitSource, LocalSource, load_pair
from .dataset.models import DEFINITIONS, TOKENS
from .exceptions import InvalidPathError
from .logging_config import get_logger
from .report.assembler import compare_definitions, compare_tokens
from .report.models import Report, TokenReport

logger = get_logger(__name__)

GIT_PREFIX = "git:"


def open_source(
    location: Union[str, Path],
    repo: Optional[Path] = None,
    subdir: str = "",
    config: Optional[DiffConfig] = None,
) -> DatasetSource:
    """Turn a source location into a DatasetSource.

    ``git:<ref>`` reads ``subdir`` of ``repo`` (default: current directory)
    at that ref; anything else is a local directory or JSON file.
    """
    config = config or load_config()
    text = str(location)
    if text.startswith(GIT_PREFIX):
        ref = text[len(GIT_PREFIX):]
        repo = repo or Path.cwd()
        if not ref:
            raise InvalidPathError(text, "missing git ref after 'git:'")
        if not Path(repo).is_dir():
            raise InvalidPathError(str(repo), "repository directory does not exist")
        return GitSource(
            repo,
            ref,
            subdir=subdir,
            pattern=config.file_pattern,
            timeout=config.git_timeout_seconds,
        )
    root = Path(text)
    if subdir and root.is_dir():
        root = root / subdir
    return LocalSource(root, pattern=config.file_pattern)


def compare_token_sources(
    original: DatasetSource,
    updated: DatasetSource,
    names: Optional[Sequence[str]] = None,
    config: Optional[DiffConfig] = None,
) -> TokenReport:
    """Load two token sources and compare them.

    Raises:
        DatasetUnavailableError: If either side cannot be read.
    """
    config = config or load_config()
    logger.info("Comparing tokens: %s -> %s", original.label, updated.label)
    old, new = load_pair(original, updated, TOKENS, names=names, config=config)
    return compare_tokens(old, new, config)


def compare_definition_sources(
    original: DatasetSource,
    updated: DatasetSource,
    names: Optional[Sequence[str]] = None,
    config: Optional[DiffConfig] = None,
) -> Report:
    """Load two definition sources and classify their changes.

    Raises:
        DatasetUnavailableError: If either side cannot be read.
    """
    config = config or load_config()
    logger.info("Comparing definitions: %s -> %s", original.label, updated.label)
    old, new = load_pair(original, updated, DEFINITIONS, names=names, config=config)
    return compare_definitions(old, new, config)
