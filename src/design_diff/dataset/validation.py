"""Load-time validation: raw JSON mappings -> typed Dataset.

Each entry is checked once against the minimal shape of its kind. Entries
that fail are kept out of ``Dataset.entries`` and recorded in
``Dataset.failures``; the rest of the snapshot is still usable.
"""

import json
from typing import Any, Dict, List, Mapping, Optional

from ..config import DEFAULT_CONFIG, DiffConfig
from ..exceptions import DatasetUnavailableError, MalformedEntryError
from ..logging_config import get_logger
from .models import (
    DEFINITIONS,
    TOKENS,
    Dataset,
    DatasetKind,
    DefinitionEntry,
    PropertySpec,
    TokenEntry,
    entry_identifiers,
    parse_reference,
)

logger = get_logger(__name__)


def build_dataset(
    raw: Any,
    kind: DatasetKind,
    config: DiffConfig = DEFAULT_CONFIG,
    source: str = "",
) -> Dataset:
    """Validate every entry of a raw snapshot.

    Args:
        raw: Mapping of entry name -> raw entry, as decoded from JSON.
        kind: ``"tokens"`` or ``"definitions"``.
        config: Field names for identifiers and deprecation markers.
        source: Human-readable origin, carried into errors and reports.

    Returns:
        A Dataset with the valid entries and the per-entry failures.

    Raises:
        DatasetUnavailableError: If the snapshot itself is not a mapping.
        ValueError: If ``kind`` is unknown.
    """
    if kind not in (TOKENS, DEFINITIONS):
        raise ValueError(f"Unknown dataset kind: {kind!r}")
    if not isinstance(raw, Mapping):
        raise DatasetUnavailableError(
            source or "<memory>", f"expected a mapping of entries, got {type(raw).__name__}"
        )

    parse = parse_token_entry if kind == TOKENS else parse_definition_entry
    dataset = Dataset(kind=kind, source=source)

    for name, value in raw.items():
        try:
            dataset.entries[name] = parse(name, value, config)
        except MalformedEntryError as e:
            logger.warning("Skipping %s: %s", name, e.reason)
            dataset.failures[str(name)] = e

    logger.debug(
        "Built %s dataset %s: %d entries, %d malformed",
        kind, source or "<memory>", len(dataset.entries), len(dataset.failures),
    )
    return dataset


# ── Shared checks ────────────────────────────────────────────────────────────

def _check_common(name: Any, raw: Any) -> Dict[str, Any]:
    if not isinstance(name, str) or not name.strip():
        raise MalformedEntryError(name, "entry name must be a non-empty string")
    if not isinstance(raw, Mapping):
        raise MalformedEntryError(name, f"entry must be an object, got {type(raw).__name__}")
    try:
        json.dumps(raw)
    except (TypeError, ValueError) as e:
        raise MalformedEntryError(name, f"value is not JSON-serializable: {e}")
    return dict(raw)


def _optional_str(name: str, raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if value is not None and not isinstance(value, str):
        raise MalformedEntryError(name, f"'{key}' must be a string")
    return value


# ── Tokens ───────────────────────────────────────────────────────────────────

def parse_token_entry(name: Any, raw: Any, config: DiffConfig = DEFAULT_CONFIG) -> TokenEntry:
    """Validate one token. Raises MalformedEntryError on shape violations."""
    data = _check_common(name, raw)

    if "value" not in data and "sets" not in data:
        raise MalformedEntryError(name, "token needs a 'value' or 'sets'")

    sets = data.get("sets")
    if sets is not None:
        if not isinstance(sets, Mapping) or not all(isinstance(m, Mapping) for m in sets.values()):
            raise MalformedEntryError(name, "'sets' must map set names to token objects")

    deprecated = data.get(config.deprecated_field)
    if deprecated is not None and not isinstance(deprecated, (bool, str)):
        raise MalformedEntryError(name, f"'{config.deprecated_field}' must be a boolean or a string")

    value = data.get("value")
    return TokenEntry(
        name=name,
        raw=data,
        value=value,
        identifiers=entry_identifiers(data, config.token_identifier_field),
        deprecated=deprecated,
        deprecated_comment=_optional_str(name, data, config.deprecated_comment_field),
        reference=parse_reference(value),
    )


# ── Definitions ──────────────────────────────────────────────────────────────

def parse_definition_entry(
    name: Any, raw: Any, config: DiffConfig = DEFAULT_CONFIG
) -> DefinitionEntry:
    """Validate one definition. Raises MalformedEntryError on shape violations."""
    data = _check_common(name, raw)

    raw_properties = data.get("properties", {})
    if not isinstance(raw_properties, Mapping):
        raise MalformedEntryError(name, "'properties' must be an object")

    properties: Dict[str, PropertySpec] = {}
    for prop_name, prop in raw_properties.items():
        if not isinstance(prop, Mapping):
            raise MalformedEntryError(name, f"property '{prop_name}' must be an object")
        enum = prop.get("enum")
        if enum is not None and not isinstance(enum, list):
            raise MalformedEntryError(name, f"'enum' of property '{prop_name}' must be an array")
        properties[prop_name] = PropertySpec(
            name=prop_name,
            type=prop.get("type"),
            enum=list(enum) if enum is not None else None,
            default=prop.get("default"),
            has_default="default" in prop,
            description=prop.get("description"),
        )

    required: List[str] = data.get("required", [])
    if not isinstance(required, list) or not all(isinstance(r, str) for r in required):
        raise MalformedEntryError(name, "'required' must be an array of property names")

    return DefinitionEntry(
        name=name,
        raw=data,
        title=_optional_str(name, data, "title"),
        schema_id=_optional_str(name, data, config.schema_identity_field),
        identifiers=entry_identifiers(data, config.definition_identifier_field),
        properties=properties,
        required=list(required),
    )
