"""Data models for structural diffing — change partitions and rename records."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


class _Absent:
    """Marker for "this key is gone" inside a deleted partition.

    JSON ``null`` is a legitimate value in both datasets, so a distinct
    sentinel is used instead of ``None``.
    """

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Absent":
        return self

    def __deepcopy__(self, memo: dict) -> "_Absent":
        return self

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


@dataclass
class DiffResult:
    """Three-way partition produced by the structural differ.

    Each partition mirrors the nesting of the compared mappings:

    * ``added``: keys present only in the updated side (new values);
    * ``deleted``: keys present only in the original side. A leaf is
      ``ABSENT``; a nested mapping means only some sub-keys vanished while the
      parent key still exists;
    * ``updated``: keys present on both sides whose value changed (new value
      at the leaf).
    """

    added: Dict[str, Any] = field(default_factory=dict)
    deleted: Dict[str, Any] = field(default_factory=dict)
    updated: Dict[str, Any] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.added or self.deleted or self.updated)

    def for_key(self, key: str) -> "DiffResult":
        """Return the partition restricted to one top-level key.

        Only nested (mapping) changes are unpacked; a leaf record under
        ``key`` means the whole value changed and is reported by the caller.
        """
        return DiffResult(
            added=_sub_mapping(self.added, key),
            deleted=_sub_mapping(self.deleted, key),
            updated=_sub_mapping(self.updated, key),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "added": to_jsonable(self.added),
            "deleted": to_jsonable(self.deleted),
            "updated": to_jsonable(self.updated),
        }


@dataclass(frozen=True)
class RenameRecord:
    """An entry that kept its identifier but changed its name."""

    old_name: str
    identifier: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"old_name": self.old_name, "identifier": self.identifier}


def _sub_mapping(partition: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = partition.get(key)
    if isinstance(value, dict):
        return value
    return {}


def to_jsonable(value: Any) -> Any:
    """Convert engine output to plain JSON values (``ABSENT`` becomes ``None``)."""
    if value is ABSENT:
        return None
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value
