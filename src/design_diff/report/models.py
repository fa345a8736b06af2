"""Report models — the format-agnostic output renderers consume.

Renderers never re-derive a classification; everything they show is in
``to_dict()``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..classify.models import DefinitionChange
from ..diff.models import ABSENT, RenameRecord, to_jsonable


@dataclass
class EntryFailure:
    """One entry that could not be validated or classified."""

    name: str
    error: str  # exception class name, e.g. "MalformedEntryError"
    message: str
    side: Optional[str] = None  # "original" | "updated" | None (both / comparison)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "error": self.error,
            "message": self.message,
            "side": self.side,
        }


@dataclass
class Summary:
    """Counts derived from a Report's buckets."""

    added: int = 0
    deleted: int = 0
    updated: int = 0
    renamed: int = 0
    breaking_changes: int = 0
    non_breaking_changes: int = 0

    @property
    def has_breaking_changes(self) -> bool:
        return self.breaking_changes > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_breaking_changes": self.has_breaking_changes,
            "total_by_category": {
                "added": self.added,
                "deleted": self.deleted,
                "updated": self.updated,
                "renamed": self.renamed,
            },
            "breaking_changes": self.breaking_changes,
            "non_breaking_changes": self.non_breaking_changes,
        }


@dataclass
class Report:
    """Comparison of two definition datasets.

    Added definitions are always non-breaking, wholly deleted ones always
    breaking; updated and renamed ones carry their own verdict.
    """

    added: Dict[str, Any] = field(default_factory=dict)
    deleted: Dict[str, Any] = field(default_factory=dict)
    breaking: Dict[str, DefinitionChange] = field(default_factory=dict)
    non_breaking: Dict[str, DefinitionChange] = field(default_factory=dict)
    renamed: Dict[str, DefinitionChange] = field(default_factory=dict)
    errors: List[EntryFailure] = field(default_factory=list)

    @property
    def summary(self) -> Summary:
        renamed_breaking = sum(1 for change in self.renamed.values() if change.is_breaking)
        return Summary(
            added=len(self.added),
            deleted=len(self.deleted),
            updated=len(self.breaking) + len(self.non_breaking),
            renamed=len(self.renamed),
            breaking_changes=len(self.deleted) + len(self.breaking) + renamed_breaking,
            non_breaking_changes=(
                len(self.added) + len(self.non_breaking) + len(self.renamed) - renamed_breaking
            ),
        )

    @property
    def has_breaking_changes(self) -> bool:
        return self.summary.has_breaking_changes

    def breaking_only(self) -> "Report":
        """A copy keeping only deletions and breaking updates or renames."""
        return Report(
            deleted=dict(self.deleted),
            breaking=dict(self.breaking),
            renamed={n: c for n, c in self.renamed.items() if c.is_breaking},
            errors=list(self.errors),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "changes": {
                "added": to_jsonable(self.added),
                "deleted": to_jsonable(self.deleted),
                "updated": {
                    "breaking": {n: c.to_dict() for n, c in self.breaking.items()},
                    "non_breaking": {n: c.to_dict() for n, c in self.non_breaking.items()},
                },
                "renamed": {n: c.to_dict() for n, c in self.renamed.items()},
            },
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass
class TokenChange:
    """One leaf-level change inside a token."""

    path: Tuple[str, ...]
    kind: str  # "added" | "deleted" | "updated"
    original_value: Any = ABSENT
    new_value: Any = ABSENT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": list(self.path),
            "kind": self.kind,
            "original_value": to_jsonable(self.original_value),
            "new_value": to_jsonable(self.new_value),
        }


@dataclass
class TokenReport:
    """Comparison of two token datasets."""

    added: Dict[str, Any] = field(default_factory=dict)
    deleted: Dict[str, Any] = field(default_factory=dict)
    renamed: Dict[str, RenameRecord] = field(default_factory=dict)
    deprecated: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    updated: Dict[str, List[TokenChange]] = field(default_factory=dict)
    errors: List[EntryFailure] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.deleted or self.renamed or self.deprecated or self.updated)

    def totals(self) -> Dict[str, int]:
        return {
            "added": len(self.added),
            "deleted": len(self.deleted),
            "renamed": len(self.renamed),
            "deprecated": len(self.deprecated),
            "updated": len(self.updated),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": {
                "has_changes": self.has_changes,
                "total_by_category": self.totals(),
            },
            "changes": {
                "added": to_jsonable(self.added),
                "deleted": to_jsonable(self.deleted),
                "renamed": {n: r.to_dict() for n, r in self.renamed.items()},
                "deprecated": to_jsonable(self.deprecated),
                "updated": {n: [c.to_dict() for c in cs] for n, cs in self.updated.items()},
            },
            "errors": [e.to_dict() for e in self.errors],
        }
