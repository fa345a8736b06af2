"""Deletion disambiguation — separates real removals from differ artifacts."""

from typing import Any, Dict, Mapping

from ..dataset.models import is_deprecated_marker
from ..logging_config import get_logger
from .models import ABSENT, RenameRecord

logger = get_logger(__name__)


def carries_deprecated_marker(value: Any, deprecated_field: str = "deprecated") -> bool:
    """True when a raw deleted value explicitly flags the entry as deprecated.

    Uses the same rule as ``TokenEntry.is_deprecated``. A fragment reporting
    that the marker itself disappeared (``{"deprecated": ABSENT}``) does not
    count.
    """
    if not isinstance(value, Mapping):
        return False
    return is_deprecated_marker(value.get(deprecated_field))


def resolve_deletions(
    renames: Mapping[str, RenameRecord],
    raw_deleted: Mapping[str, Any],
    deprecated_field: str = "deprecated",
) -> Dict[str, Any]:
    """Filter the differ's ``deleted`` partition down to true deletions.

    A name is kept when the whole entry is gone (``ABSENT``) or its value
    carries a deprecated marker, and it is not the old name of a rename.
    Anything else is the trace of a nested sub-field removal on an entry
    that still exists. Renames win over deprecation.
    """
    renamed_from = {record.old_name for record in renames.values()}
    kept: Dict[str, Any] = {}

    for name, value in raw_deleted.items():
        if name in renamed_from:
            logger.debug("%s was renamed, not deleted", name)
            continue
        if value is ABSENT or carries_deprecated_marker(value, deprecated_field):
            kept[name] = value

    return kept
