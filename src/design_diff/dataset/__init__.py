"""Dataset layer — typed snapshots, validation and sources."""

from .loader import DatasetSource, GitSource, LocalSource, load_dataset, load_pair
from .models import (
    DEFINITIONS,
    TOKENS,
    Dataset,
    DefinitionEntry,
    Entry,
    PropertySpec,
    ReferenceMarker,
    TokenEntry,
    entry_identifiers,
    is_deprecated_marker,
    parse_reference,
)
from .validation import build_dataset, parse_definition_entry, parse_token_entry

__all__ = [
    "DEFINITIONS",
    "TOKENS",
    "Dataset",
    "DatasetSource",
    "DefinitionEntry",
    "Entry",
    "GitSource",
    "LocalSource",
    "PropertySpec",
    "ReferenceMarker",
    "TokenEntry",
    "build_dataset",
    "entry_identifiers",
    "is_deprecated_marker",
    "load_dataset",
    "load_pair",
    "parse_definition_entry",
    "parse_reference",
    "parse_token_entry",
]
