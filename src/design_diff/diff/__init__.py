"""Diff layer — structural partition, rename detection, deletion disambiguation."""

from .deletion import carries_deprecated_marker, resolve_deletions
from .engine import deep_equal, detailed_diff
from .models import ABSENT, DiffResult, RenameRecord, to_jsonable
from .rename import build_identity_index, detect_renames

__all__ = [
    "ABSENT",
    "DiffResult",
    "RenameRecord",
    "build_identity_index",
    "carries_deprecated_marker",
    "deep_equal",
    "detailed_diff",
    "detect_renames",
    "resolve_deletions",
    "to_jsonable",
]
