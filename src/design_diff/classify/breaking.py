"""Breaking-change classification for updated definitions.

The structural differ treats arrays as opaque, so two membership diffs are
layered on first:
  * enum values removed from a retained property land in
    ``deleted.properties.<name>.enum`` (added ones in ``added...enum``),
    keyed by value;
  * newly required fields land in ``added.required``, keyed by field name.

Breaking rules, evaluated on that normalized partition:
  1. anything deleted outside ``properties``;
  2. a property that no longer exists;
  3. a retained property that lost enum values (a default-only removal
     is fine; other sub-field removals are not flagged);
  4. a newly required field;
  5. a changed ``title`` or schema-identity field.
Everything else (optional properties, wider enums, docs) is non-breaking.
"""

import copy
import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..dataset.models import DefinitionEntry, PropertySpec
from ..diff.engine import deep_equal
from ..diff.models import ABSENT, DiffResult
from ..logging_config import get_logger
from .models import DefinitionChange, PropertyChange

logger = get_logger(__name__)


# ── Helpers ──────────────────────────────────────────────────────────────────

def _json(value: Any) -> str:
    return json.dumps(value, sort_keys=True)


def _member_keys(values: Sequence[Any]) -> Dict[str, Any]:
    """Key enum members for a keyed partition: strings bare, others as JSON.

    A non-string whose JSON text equals a string member (``1`` next to
    ``"1"``) gets its type appended so both keep a key.
    """
    strings = {v for v in values if isinstance(v, str)}
    keyed: Dict[str, Any] = {}
    for value in values:
        if isinstance(value, str):
            keyed[value] = value
            continue
        key = _json(value)
        if key in strings:
            key = f"{key} ({type(value).__name__})"
        keyed[key] = value
    return keyed


def _contains(values: Sequence[Any], candidate: Any) -> bool:
    return any(deep_equal(candidate, v) for v in values)


def _missing_from(values: Sequence[Any], others: Sequence[Any]) -> List[Any]:
    return [v for v in values if not _contains(others, v)]


def _nested(partition: Dict[str, Any], *path: str) -> Optional[Dict[str, Any]]:
    """Walk ``path`` creating empty dicts; None if a leaf record is in the way."""
    node = partition
    for key in path:
        child = node.setdefault(key, {})
        if not isinstance(child, dict):
            return None
        node = child
    return node


def _discard(partition: Dict[str, Any], *path: str) -> None:
    """Remove the record at ``path`` and prune parents left empty."""
    parents: List[Tuple[Dict[str, Any], str]] = []
    node: Any = partition
    for key in path[:-1]:
        if not isinstance(node, dict) or not isinstance(node.get(key), dict):
            return
        parents.append((node, key))
        node = node[key]
    if isinstance(node, dict):
        node.pop(path[-1], None)
    for parent, key in reversed(parents):
        if parent[key]:
            break
        del parent[key]


# ── Normalization ────────────────────────────────────────────────────────────

def normalize_changes(
    changes: DiffResult,
    original_def: DefinitionEntry,
    updated_def: DefinitionEntry,
) -> DiffResult:
    """Return a copy of ``changes`` with enum and required membership diffs."""
    normalized = copy.deepcopy(changes)

    for name, old_prop in original_def.properties.items():
        new_prop = updated_def.properties.get(name)
        if new_prop is None or old_prop.enum is None or new_prop.enum is None:
            continue

        removed = _missing_from(old_prop.enum, new_prop.enum)
        added = _missing_from(new_prop.enum, old_prop.enum)
        if removed:
            enum_map = _nested(normalized.deleted, "properties", name, "enum")
            if enum_map is not None:
                for key in _member_keys(removed):
                    enum_map[key] = ABSENT
        if added:
            enum_map = _nested(normalized.added, "properties", name, "enum")
            if enum_map is not None:
                for key, value in _member_keys(added).items():
                    enum_map[key] = copy.deepcopy(value)
        if removed or added:
            _discard(normalized.updated, "properties", name, "enum")

    newly_required = [r for r in updated_def.required if r not in original_def.required]
    if newly_required:
        normalized.added["required"] = {r: r for r in newly_required}
        if all(r in updated_def.required for r in original_def.required):
            normalized.updated.pop("required", None)

    return normalized


# ── Breaking rules ───────────────────────────────────────────────────────────

def breaking_reasons(
    normalized: DiffResult,
    updated_def: DefinitionEntry,
    schema_identity_field: str = "$schema",
) -> List[str]:
    """Every reason the normalized changes are breaking; empty if none."""
    reasons: List[str] = []

    for key, value in normalized.deleted.items():
        if key != "properties" or not isinstance(value, dict):
            reasons.append(f"removed {key}")

    deleted_properties = normalized.deleted.get("properties")
    if isinstance(deleted_properties, dict):
        for prop, fragment in deleted_properties.items():
            if prop not in updated_def.properties:
                reasons.append(f"removed property {prop}")
                continue
            if not isinstance(fragment, dict):
                continue
            enum_removed = fragment.get("enum")
            if isinstance(enum_removed, dict) and enum_removed:
                reasons.append(f"removed enum values from {prop}: {', '.join(map(str, enum_removed))}")
            elif set(fragment) == {"default"}:
                logger.debug("%s: default removed only, not breaking", prop)

    newly_required = normalized.added.get("required")
    if newly_required:
        names = newly_required.keys() if isinstance(newly_required, dict) else newly_required
        reasons.append("newly required: " + ", ".join(str(n) for n in names))

    for key in ("title", schema_identity_field):
        if key in normalized.updated:
            reasons.append(f"{key} changed")

    return reasons


def is_breaking_change(
    changes: DiffResult,
    original_def: DefinitionEntry,
    updated_def: DefinitionEntry,
    schema_identity_field: str = "$schema",
) -> bool:
    """True when the changes to one definition can break its consumers."""
    normalized = normalize_changes(changes, original_def, updated_def)
    return bool(breaking_reasons(normalized, updated_def, schema_identity_field))


# ── Enhancement ──────────────────────────────────────────────────────────────

def describe_property_change(old: PropertySpec, new: PropertySpec) -> PropertyChange:
    """Human-readable summary of what changed in a retained property."""
    changes: List[str] = []

    if old.has_default and not new.has_default:
        changes.append(f"removed default: {_json(old.default)}")
    elif new.has_default and not old.has_default:
        changes.append(f"added default: {_json(new.default)}")
    elif old.has_default and not deep_equal(old.default, new.default):
        changes.append(f"default changed from {_json(old.default)} to {_json(new.default)}")

    if old.enum is not None and new.enum is not None:
        added = _missing_from(new.enum, old.enum)
        removed = _missing_from(old.enum, new.enum)
        if added:
            changes.append("added enum values: " + ", ".join(_json(v) for v in added))
        if removed:
            changes.append("removed enum values: " + ", ".join(_json(v) for v in removed))
    elif old.enum is not None:
        changes.append("removed enum restriction")
    elif new.enum is not None:
        changes.append("added enum: " + ", ".join(_json(v) for v in new.enum))

    if not deep_equal(old.type, new.type):
        changes.append(f"type changed from {old.type} to {new.type}")

    if old.description != new.description:
        changes.append("description updated")

    return PropertyChange(
        name=new.name,
        changes=changes,
        description=new.description,
        original_type=old.type,
        updated_type=new.type,
    )


def enhance_changes(
    normalized: DiffResult,
    original_def: DefinitionEntry,
    updated_def: DefinitionEntry,
) -> Tuple[DiffResult, Dict[str, PropertyChange]]:
    """Turn add/delete records of retained properties into property updates.

    Returns:
        ``(enhanced, property_changes)``. ``enhanced`` no longer lists the
        retained properties under ``added``/``deleted``.
    """
    enhanced = copy.deepcopy(normalized)
    candidates: List[str] = []
    for partition in (normalized.deleted, normalized.added, normalized.updated):
        props = partition.get("properties")
        if isinstance(props, dict):
            candidates.extend(p for p in props if p not in candidates)

    property_changes: Dict[str, PropertyChange] = {}
    for name in candidates:
        old = original_def.properties.get(name)
        new = updated_def.properties.get(name)
        if old is None or new is None:
            continue
        property_changes[name] = describe_property_change(old, new)
        _discard(enhanced.deleted, "properties", name)
        _discard(enhanced.added, "properties", name)

    return enhanced, property_changes


# ── Public API ───────────────────────────────────────────────────────────────

def classify_definition(
    name: str,
    changes: DiffResult,
    original_def: DefinitionEntry,
    updated_def: DefinitionEntry,
    schema_identity_field: str = "$schema",
) -> DefinitionChange:
    """Classify the changes to one definition as breaking or non-breaking.

    Args:
        name: Definition name (for the report).
        changes: The differ's partition restricted to this definition.
        original_def: The definition before the change.
        updated_def: The definition after the change.
        schema_identity_field: Field whose change is always breaking.

    Returns:
        A DefinitionChange with the verdict, reasons and enhanced changes.
    """
    normalized = normalize_changes(changes, original_def, updated_def)
    reasons = breaking_reasons(normalized, updated_def, schema_identity_field)
    enhanced, property_changes = enhance_changes(normalized, original_def, updated_def)

    if reasons:
        logger.debug("%s is breaking: %s", name, "; ".join(reasons))

    return DefinitionChange(
        name=name,
        is_breaking=bool(reasons),
        changes=enhanced,
        property_changes=property_changes,
        reasons=reasons,
    )
