"""Reference resolution — follow alias chains to a concrete value.

A chain always ends in one of three ways: a concrete value, a
``CircularReferenceError`` (an entry is reached twice) or a
``TargetNotFoundError``. Every step adds to the visited set, so the walk is
bounded by the dataset size.

A set token resolves to ``{mode: value}`` with every member followed; one
broken member fails the whole token.
"""

from dataclasses import dataclass, field
from typing import AbstractSet, Any, Dict, List, Mapping, Optional, Tuple

from ..dataset.models import Dataset, Entry, ReferenceMarker, TokenEntry, parse_reference
from ..exceptions import CircularReferenceError, ResolutionError, TargetNotFoundError
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Resolution:
    """The terminal value of a reference chain and the entry that owns it."""

    value: Any
    entry: Entry
    chain: List[str] = field(default_factory=list)  # entry names, first hop to owner

    @property
    def is_alias(self) -> bool:
        return len(self.chain) > 1


def _reference_of(entry: Entry) -> Optional[ReferenceMarker]:
    if isinstance(entry, TokenEntry):
        return entry.reference
    return parse_reference(entry.raw.get("value"))


def _value_of(entry: Entry) -> Any:
    if isinstance(entry, TokenEntry):
        return entry.value
    return entry.raw


def _set_members(entry: Entry) -> Optional[Mapping[str, Any]]:
    if isinstance(entry, TokenEntry) and entry.is_set and isinstance(entry.raw["sets"], Mapping):
        return entry.raw["sets"]
    return None


def _resolve_members(
    members: Mapping[str, Any],
    dataset: Dataset,
    seen: AbstractSet[str],
    chain: List[str],
) -> Dict[str, Any]:
    """``{mode: value}`` for a set token, following each member's alias.

    Members start from everything already on the chain, so a member that
    points back at the set (or anything before it) is a cycle.
    """
    values: Dict[str, Any] = {}
    for mode, member in members.items():
        raw_value = member.get("value")
        marker = parse_reference(raw_value)
        if marker is None:
            values[mode] = raw_value
            continue
        try:
            values[mode] = _follow(marker.target, marker.by, dataset, seen, list(chain)).value
        except ResolutionError:
            logger.debug("Set member %s.%s does not resolve", chain[-1], mode)
            raise
    return values


def _follow(
    target: str,
    by: str,
    dataset: Dataset,
    visited: AbstractSet[str],
    chain: List[str],
) -> Resolution:
    seen = set(visited)
    while True:
        if target in seen:
            raise CircularReferenceError(target, chain + [target])
        seen.add(target)

        entry = dataset.find(target, by)
        if entry is None:
            raise TargetNotFoundError(target, chain + [target])
        if entry.name != target and entry.name in seen:
            raise CircularReferenceError(entry.name, chain + [entry.name])
        seen.add(entry.name)
        seen.update(entry.identifiers)
        chain.append(entry.name)

        marker = _reference_of(entry)
        if marker is None:
            members = _set_members(entry)
            if members is not None:
                return Resolution(_resolve_members(members, dataset, seen, chain), entry, chain)
            return Resolution(value=_value_of(entry), entry=entry, chain=chain)
        target, by = marker.target, marker.by


def resolve_reference(
    target_id: str,
    dataset: Dataset,
    visited: AbstractSet[str] = frozenset(),
    by: str = "identifier",
) -> Resolution:
    """Resolve ``target_id`` to a concrete value.

    Args:
        target_id: Identifier (or, with ``by="name"``, entry name) to start from.
        dataset: The snapshot to resolve against.
        visited: Targets already on the chain; revisiting one is a cycle.
        by: ``"identifier"`` (falls back to names) or ``"name"``.

    Returns:
        Resolution with the terminal value, its owning entry and the chain.

    Raises:
        CircularReferenceError: If the chain comes back to a visited entry.
        TargetNotFoundError: If a hop points at a missing entry.
    """
    return _follow(target_id, by, dataset, visited, [])


def resolve_entry(name: str, dataset: Dataset) -> Resolution:
    """Resolve the value of the entry called ``name``.

    Concrete entries resolve to themselves with a one-element chain.
    """
    return _follow(name, "name", dataset, frozenset(), [])


def resolve_all(dataset: Dataset) -> Tuple[Dict[str, Resolution], Dict[str, ResolutionError]]:
    """Resolve every entry, collecting failures instead of stopping at the first.

    Returns:
        ``(resolved, failures)`` keyed by entry name.
    """
    resolved: Dict[str, Resolution] = {}
    failures: Dict[str, ResolutionError] = {}

    for name in dataset:
        try:
            resolved[name] = resolve_entry(name, dataset)
        except ResolutionError as e:
            logger.info("Cannot resolve %s: %s", name, e.message)
            failures[name] = e

    return resolved, failures
