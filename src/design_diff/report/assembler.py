"""Dataset assembler — runs the whole comparison pipeline for two snapshots.

Pipeline:
  1. Drop entries that failed validation on either side (reported as errors).
  2. Structural diff of the two raw datasets.
  3. Rename detection on the ``added`` partition.
  4. Deletion disambiguation of the ``deleted`` partition.
  5. Per-entry classification (definitions) or leaf change listing (tokens).

One entry failing to classify is logged and recorded; the rest continue.
"""

import copy
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple

from ..classify.breaking import classify_definition
from ..classify.models import DefinitionChange
from ..config import DEFAULT_CONFIG, DiffConfig
from ..dataset.models import Dataset, DefinitionEntry, TokenEntry
from ..diff.deletion import resolve_deletions
from ..diff.engine import detailed_diff
from ..diff.models import ABSENT, DiffResult
from ..diff.rename import detect_renames
from ..exceptions import DesignDiffError
from ..logging_config import get_logger
from .models import EntryFailure, Report, TokenChange, TokenReport

logger = get_logger(__name__)

# Failures of a single entry that should not abort the whole comparison
_ENTRY_ERRORS = (DesignDiffError, TypeError, ValueError, KeyError)

# Levels a definition diff must reach for the breaking rules:
# properties -> <name> -> <field>
DEFINITION_DIFF_DEPTH = 3


# ── Shared steps ─────────────────────────────────────────────────────────────

def _collect_failures(original: Dataset, updated: Dataset) -> Tuple[List[EntryFailure], Set[str]]:
    """Validation failures of both sides, and the names to leave out."""
    failures: List[EntryFailure] = []
    excluded: Set[str] = set()
    for side, dataset in (("original", original), ("updated", updated)):
        for name in sorted(dataset.failures):
            error = dataset.failures[name]
            failures.append(EntryFailure(name, type(error).__name__, str(error), side))
            excluded.add(name)
    if excluded:
        logger.warning("Skipping %d malformed entr(y/ies): %s", len(excluded), ", ".join(sorted(excluded)))
    return failures, excluded


def _comparable(dataset: Dataset, excluded: Set[str]) -> Dict[str, Any]:
    return {name: raw for name, raw in dataset.raw().items() if name not in excluded}


def _entry_depth(max_depth: int, min_depth: int) -> int:
    """Depth limit for diffing one entry on its own."""
    return max(max_depth - 1, min_depth)


def _entry_diff(
    diff: DiffResult,
    name: str,
    old_raw: Mapping[str, Any],
    new_raw: Mapping[str, Any],
    max_depth: int,
    min_depth: int = 1,
) -> DiffResult:
    """The changes below one entry that exists on both sides.

    The dataset-wide diff already holds them unless the configured depth
    limit cut it off above ``min_depth`` levels inside the entry; the pair is
    then diffed again on its own.
    """
    depth = _entry_depth(max_depth, min_depth)
    if depth == max_depth - 1:
        return diff.for_key(name)
    return detailed_diff(old_raw, new_raw, max_depth=depth)


def _run(
    original: Dataset,
    updated: Dataset,
    identifier_field: str,
    config: DiffConfig,
):
    errors, excluded = _collect_failures(original, updated)
    old_raw = _comparable(original, excluded)
    new_raw = _comparable(updated, excluded)

    diff = detailed_diff(old_raw, new_raw, max_depth=config.max_depth)
    renames = detect_renames(old_raw, diff.added, identifier_field)
    deleted = resolve_deletions(renames, diff.deleted, config.deprecated_field)

    added = {
        name: copy.deepcopy(new_raw[name])
        for name in sorted(diff.added)
        if name not in old_raw and name not in renames
    }
    removed = {
        name: copy.deepcopy(old_raw[name])
        for name in sorted(deleted)
        if name not in new_raw
    }
    return errors, old_raw, new_raw, diff, renames, added, removed


def _changed_names(diff: DiffResult, old_raw: Mapping[str, Any], new_raw: Mapping[str, Any]) -> List[str]:
    names = set(diff.added) | set(diff.deleted) | set(diff.updated)
    return sorted(n for n in names if n in old_raw and n in new_raw)


# ── Definitions ──────────────────────────────────────────────────────────────

def compare_definitions(
    original: Dataset,
    updated: Dataset,
    config: DiffConfig = DEFAULT_CONFIG,
) -> Report:
    """Compare two definition datasets and classify every change.

    Args:
        original: The earlier snapshot.
        updated: The later snapshot.
        config: Identifier fields, depth limit, schema-identity field.

    Returns:
        Report with added, deleted, updated (breaking / non-breaking) and
        renamed definitions, plus per-entry errors.
    """
    errors, old_raw, new_raw, diff, renames, added, removed = _run(
        original, updated, config.definition_identifier_field, config
    )
    report = Report(added=added, deleted=removed, errors=errors)

    for name in _changed_names(diff, old_raw, new_raw):
        change = _classify(
            name, name, original, updated, errors, config,
            lambda n=name: _entry_diff(
                diff, n, old_raw[n], new_raw[n], config.max_depth, DEFINITION_DIFF_DEPTH
            ),
        )
        if change is None:
            continue
        target = report.breaking if change.is_breaking else report.non_breaking
        target[name] = change

    for new_name in sorted(renames):
        old_name = renames[new_name].old_name
        change = _classify(
            new_name, old_name, original, updated, errors, config,
            lambda o=old_name, n=new_name: detailed_diff(
                old_raw[o], new_raw[n], max_depth=_entry_depth(config.max_depth, DEFINITION_DIFF_DEPTH)
            ),
        )
        if change is None:
            continue
        change.renamed_from = old_name
        report.renamed[new_name] = change

    summary = report.summary
    logger.info(
        "Definitions: %d added, %d deleted, %d updated, %d renamed (%d breaking)",
        summary.added, summary.deleted, summary.updated, summary.renamed, summary.breaking_changes,
    )
    return report


def _classify(
    name: str,
    old_name: str,
    original: Dataset,
    updated: Dataset,
    errors: List[EntryFailure],
    config: DiffConfig,
    changes_for: Callable[[], DiffResult],
) -> Optional[DefinitionChange]:
    try:
        original_def = original[old_name]
        updated_def = updated[name]
        if not isinstance(original_def, DefinitionEntry) or not isinstance(updated_def, DefinitionEntry):
            raise TypeError(f"{name} is not a definition entry")
        return classify_definition(
            name,
            changes_for(),
            original_def,
            updated_def,
            schema_identity_field=config.schema_identity_field,
        )
    except _ENTRY_ERRORS as e:
        message = str(e)
        logger.warning("Could not classify %s: %s", name, message)
        errors.append(EntryFailure(name, type(e).__name__, message))
        return None


# ── Tokens ───────────────────────────────────────────────────────────────────

def _lookup(root: Any, path: Tuple[str, ...]) -> Any:
    node = root
    for key in path:
        if not isinstance(node, Mapping) or key not in node:
            return ABSENT
        node = node[key]
    return node


def token_changes(
    changes: DiffResult,
    original: Mapping[str, Any],
    updated: Mapping[str, Any],
    ignore: Tuple[str, ...] = (),
) -> List[TokenChange]:
    """Flatten one token's partition into leaf-level changes.

    A mapping in a partition is descended into only when both sides hold a
    mapping at that path; otherwise it is the changed value itself.
    Top-level fields named in ``ignore`` are skipped.
    """
    result: List[TokenChange] = []
    for kind, partition in (("added", changes.added), ("deleted", changes.deleted), ("updated", changes.updated)):
        stack: List[Tuple[Tuple[str, ...], Mapping[str, Any]]] = [((), partition)]
        while stack:
            prefix, node = stack.pop()
            for key, value in node.items():
                path = prefix + (key,)
                if not prefix and key in ignore:
                    continue
                old_value = _lookup(original, path)
                new_value = _lookup(updated, path)
                if isinstance(value, dict) and isinstance(old_value, Mapping) and isinstance(new_value, Mapping):
                    stack.append((path, value))
                    continue
                result.append(TokenChange(path, kind, copy.deepcopy(old_value), copy.deepcopy(new_value)))

    result.sort(key=lambda c: (c.path, c.kind))
    return result


def compare_tokens(
    original: Dataset,
    updated: Dataset,
    config: DiffConfig = DEFAULT_CONFIG,
) -> TokenReport:
    """Compare two token datasets.

    Renamed tokens are compared against their old body, so a rename that
    also changes a value shows up in both ``renamed`` and ``updated``.
    """
    errors, old_raw, new_raw, diff, renames, added, removed = _run(
        original, updated, config.token_identifier_field, config
    )
    report = TokenReport(added=added, deleted=removed, errors=errors)
    report.renamed = {name: renames[name] for name in sorted(renames)}

    ignore = (config.deprecated_field, config.deprecated_comment_field)
    pairs = [(name, name) for name in sorted(set(old_raw) & set(new_raw))]
    pairs += [(renames[name].old_name, name) for name in sorted(renames)]

    for old_name, new_name in pairs:
        try:
            old_entry = original[old_name]
            new_entry = updated[new_name]
            if not isinstance(old_entry, TokenEntry) or not isinstance(new_entry, TokenEntry):
                raise TypeError(f"{new_name} is not a token entry")

            if new_entry.is_deprecated and not old_entry.is_deprecated:
                report.deprecated[new_name] = {
                    "deprecated": new_entry.deprecated,
                    "comment": new_entry.deprecated_comment,
                }

            if old_name == new_name:
                changes = _entry_diff(diff, new_name, old_raw[old_name], new_raw[new_name], config.max_depth)
            else:
                changes = detailed_diff(
                    old_raw[old_name], new_raw[new_name], max_depth=_entry_depth(config.max_depth, 1)
                )
            leaf_changes = token_changes(changes, old_raw[old_name], new_raw[new_name], ignore)
            if leaf_changes:
                report.updated[new_name] = leaf_changes
        except _ENTRY_ERRORS as e:
            message = str(e)
            logger.warning("Could not compare token %s: %s", new_name, message)
            report.errors.append(EntryFailure(new_name, type(e).__name__, message))

    totals = report.totals()
    logger.info(
        "Tokens: %d added, %d deleted, %d renamed, %d deprecated, %d updated",
        totals["added"], totals["deleted"], totals["renamed"], totals["deprecated"], totals["updated"],
    )
    return report
