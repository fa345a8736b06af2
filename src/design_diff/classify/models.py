"""Data models for definition classification."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..diff.models import DiffResult, to_jsonable


@dataclass
class PropertyChange:
    """A retained property whose definition changed."""

    name: str
    changes: List[str] = field(default_factory=list)  # human-readable, e.g. "removed enum values: \"large\""
    description: Optional[str] = None
    original_type: Any = None
    updated_type: Any = None
    type: str = "property-update"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "changes": list(self.changes),
            "description": self.description,
            "original_type": to_jsonable(self.original_type),
            "updated_type": to_jsonable(self.updated_type),
        }


@dataclass
class DefinitionChange:
    """Classification of one updated (or renamed) definition.

    ``changes`` is the enhanced partition: retained properties appear in
    ``property_changes`` instead of as spurious add/delete pairs.
    """

    name: str
    is_breaking: bool
    changes: DiffResult
    property_changes: Dict[str, PropertyChange] = field(default_factory=dict)
    reasons: List[str] = field(default_factory=list)
    renamed_from: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        changes = self.changes.to_dict()
        changes["enhanced"] = {
            "properties": {name: pc.to_dict() for name, pc in self.property_changes.items()}
        }
        result = {
            "type": "renamed" if self.renamed_from else "updated",
            "is_breaking": self.is_breaking,
            "reasons": list(self.reasons),
            "changes": changes,
        }
        if self.renamed_from:
            result["old_name"] = self.renamed_from
        return result
