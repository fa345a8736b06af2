"""Breaking-change classification for structural definitions."""

from .breaking import (
    breaking_reasons,
    classify_definition,
    describe_property_change,
    enhance_changes,
    is_breaking_change,
    normalize_changes,
)
from .models import DefinitionChange, PropertyChange

__all__ = [
    "DefinitionChange",
    "PropertyChange",
    "breaking_reasons",
    "classify_definition",
    "describe_property_change",
    "enhance_changes",
    "is_breaking_change",
    "normalize_changes",
]
