"""Rename detection — matches added entries to original ones by stable identifier."""

from typing import Any, Dict, Mapping

from ..dataset.models import entry_identifiers
from ..logging_config import get_logger
from .models import RenameRecord

logger = get_logger(__name__)


def build_identity_index(
    dataset: Mapping[str, Any],
    identifier_field: str,
) -> Dict[str, str]:
    """Map every identifier in ``dataset`` to the entry name that carries it.

    Built fresh for each comparison. When two entries share an identifier
    the first one keeps it and a warning is logged.
    """
    index: Dict[str, str] = {}
    for name, entry in dataset.items():
        for identifier in entry_identifiers(entry, identifier_field):
            owner = index.setdefault(identifier, name)
            if owner != name:
                logger.warning(
                    "Identifier %s is used by both %s and %s; keeping %s",
                    identifier, owner, name, owner,
                )
    return index


def detect_renames(
    original: Mapping[str, Any],
    added_entries: Mapping[str, Any],
    identifier_field: str = "uuid",
) -> Dict[str, RenameRecord]:
    """Detect entries that were renamed rather than added.

    An added entry is a rename when its name does not exist in ``original``
    but one of its identifiers does, under a different name. Entries
    without an identifier are never renames.

    Args:
        original: The earlier raw dataset (name -> entry).
        added_entries: The differ's ``added`` partition (name -> entry).
        identifier_field: Entry field holding the stable identifier.

    Returns:
        A dict mapping ``{new_name: RenameRecord(old_name)}``.
    """
    index = build_identity_index(original, identifier_field)
    renames: Dict[str, RenameRecord] = {}

    for new_name, entry in added_entries.items():
        if new_name in original:
            # Fragment of an entry that exists on both sides
            continue

        for identifier in entry_identifiers(entry, identifier_field):
            old_name = index.get(identifier)
            if old_name is not None and old_name != new_name:
                renames[new_name] = RenameRecord(old_name=old_name, identifier=identifier)
                logger.debug("Detected rename: %s -> %s", old_name, new_name)
                break

    if renames:
        logger.info("Detected %d rename(s)", len(renames))

    return renames
