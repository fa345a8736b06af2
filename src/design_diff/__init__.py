"""
design-diff - change classification for design tokens and component schemas

Compares two versions of a named, hierarchical dataset and reports what was
added, genuinely removed, renamed or deprecated; for component schemas every
update is classified as breaking or non-breaking.
"""

__version__ = "0.3.0"

from .api import compare_definition_sources, compare_token_sources, open_source
from .config import DiffConfig, load_config
from .dataset import Dataset, GitSource, LocalSource, build_dataset, load_pair
from .diff import detailed_diff, detect_renames, resolve_deletions
from .classify import classify_definition, is_breaking_change
from .references import resolve_reference
from .report import Report, TokenReport, compare_definitions, compare_tokens

__all__ = [
    "compare_definition_sources",  # Main entry points (load + compare)
    "compare_token_sources",
    "open_source",
    "compare_definitions",  # Compare already-loaded datasets
    "compare_tokens",
    "Report",
    "TokenReport",
    "Dataset",
    "LocalSource",
    "GitSource",
    "build_dataset",
    "load_pair",
    "DiffConfig",
    "load_config",
    "detailed_diff",
    "detect_renames",
    "resolve_deletions",
    "classify_definition",
    "is_breaking_change",
    "resolve_reference",
]
