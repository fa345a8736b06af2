"""Exception hierarchy for design-diff."""

from .base import DesignDiffError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError
from .engine import (
    CircularReferenceError,
    DatasetUnavailableError,
    MalformedEntryError,
    ResolutionError,
    TargetNotFoundError,
)

__all__ = [
    "DesignDiffError",
    "ResolutionError",
    "CircularReferenceError",
    "TargetNotFoundError",
    "MalformedEntryError",
    "DatasetUnavailableError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidPathError",
]
