"""Structural differ — three-way partition of two nested mappings.

The walk is an explicit stack instead of recursion:
  1. Pop a (original, updated) pair of mappings and classify every key in
     their union as added, deleted, unchanged, changed-leaf or changed-mapping.
  2. Changed mappings get fresh child partitions and are pushed back on the
     stack one level deeper.
  3. After the walk, child partitions are attached to their parents
     deepest-first, so only non-empty sub-partitions survive.

Arrays and scalars are opaque leaves: any difference replaces them
wholesale in ``updated``. Membership-style comparisons (enum values,
required fields) belong to the classifier.
"""

import copy
from typing import Any, Dict, Iterator, List, Mapping, Tuple

from ..logging_config import get_logger
from .models import ABSENT, DiffResult

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 64

_Partition = Tuple[Dict[str, Any], Dict[str, Any], Dict[str, Any]]


# ── Equality ─────────────────────────────────────────────────────────────────

def deep_equal(left: Any, right: Any) -> bool:
    """Structural equality on JSON-like values.

    Unlike ``==``, booleans never equal numbers (``True`` is not ``1``), and
    mappings never equal sequences.
    """
    pending: List[Tuple[Any, Any]] = [(left, right)]
    while pending:
        a, b = pending.pop()
        if a is b:
            continue
        if isinstance(a, Mapping) and isinstance(b, Mapping):
            if a.keys() != b.keys():
                return False
            pending.extend((a[k], b[k]) for k in a)
        elif _is_sequence(a) and _is_sequence(b):
            if len(a) != len(b):
                return False
            pending.extend(zip(a, b))
        elif isinstance(a, (Mapping, list, tuple)) or isinstance(b, (Mapping, list, tuple)):
            return False
        elif isinstance(a, bool) or isinstance(b, bool):
            if type(a) is not type(b) or a != b:
                return False
        elif a != b:
            return False
    return True


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _union_keys(original: Mapping[str, Any], updated: Mapping[str, Any]) -> Iterator[str]:
    """Original keys in order, then keys only the updated side has."""
    yield from original
    for key in updated:
        if key not in original:
            yield key


# ── Public API ───────────────────────────────────────────────────────────────

def detailed_diff(
    original: Mapping[str, Any],
    updated: Mapping[str, Any],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> DiffResult:
    """Compute the added / deleted / updated partition of two mappings.

    Args:
        original: The earlier mapping (never mutated).
        updated: The later mapping (never mutated).
        max_depth: Nesting level from which changed mappings are reported as
                   opaque leaves in ``updated`` instead of being walked.

    Returns:
        A DiffResult whose values are deep copies of the inputs. Identical
        inputs give an empty result.

    Raises:
        TypeError: If either side is not a mapping.
    """
    if not isinstance(original, Mapping) or not isinstance(updated, Mapping):
        raise TypeError(
            "detailed_diff compares mappings, got "
            f"{type(original).__name__} and {type(updated).__name__}"
        )

    result = DiffResult()
    stack: List[Tuple[Mapping[str, Any], Mapping[str, Any], _Partition, int]] = [
        (original, updated, (result.added, result.deleted, result.updated), 0)
    ]
    # (parent partition, key, child partition) in creation order
    attachments: List[Tuple[_Partition, str, _Partition]] = []
    truncated = 0

    while stack:
        old, new, (added, deleted, changed), depth = stack.pop()
        for key in _union_keys(old, new):
            if key not in new:
                deleted[key] = ABSENT
                continue
            if key not in old:
                added[key] = copy.deepcopy(new[key])
                continue

            old_value = old[key]
            new_value = new[key]
            if deep_equal(old_value, new_value):
                continue

            if isinstance(old_value, Mapping) and isinstance(new_value, Mapping):
                if depth + 1 < max_depth:
                    child: _Partition = ({}, {}, {})
                    attachments.append(((added, deleted, changed), key, child))
                    stack.append((old_value, new_value, child, depth + 1))
                    continue
                truncated += 1

            changed[key] = copy.deepcopy(new_value)

    # Children were created after their parents, so reversed order attaches
    # the deepest partitions first.
    for (added, deleted, changed), key, (c_added, c_deleted, c_changed) in reversed(attachments):
        if c_added:
            added[key] = c_added
        if c_deleted:
            deleted[key] = c_deleted
        if c_changed:
            changed[key] = c_changed

    if truncated:
        logger.debug("Depth limit %d reached on %d mapping(s); compared as leaves", max_depth, truncated)

    return result
