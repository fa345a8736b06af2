"""Typed dataset snapshots — token and definition entries validated once at load."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Literal, Mapping, Optional, Tuple, Union

from ..exceptions import MalformedEntryError

DatasetKind = Literal["tokens", "definitions"]

TOKENS: DatasetKind = "tokens"
DEFINITIONS: DatasetKind = "definitions"

REFERENCE_KIND = "reference"

# Spectrum-style alias: the whole value is "{other-token-name}"
_ALIAS_RE = re.compile(r"^\{([^{}\s]+)\}$")


@dataclass(frozen=True)
class ReferenceMarker:
    """A value that points at another entry instead of holding one.

    ``by`` tells the resolver how to look the target up: ``"identifier"`` for
    ``{"kind": "reference", "targetId": ...}`` markers, ``"name"`` for alias
    strings.
    """

    target: str
    by: str = "identifier"


def parse_reference(value: Any) -> Optional[ReferenceMarker]:
    """Return the reference carried by ``value``, or None for concrete values."""
    if isinstance(value, Mapping):
        if value.get("kind") == REFERENCE_KIND and isinstance(value.get("targetId"), str):
            return ReferenceMarker(value["targetId"], "identifier")
        return None
    if isinstance(value, str):
        match = _ALIAS_RE.match(value)
        if match:
            return ReferenceMarker(match.group(1), "name")
    return None


def is_deprecated_marker(value: Any) -> bool:
    """True for a deprecated-field value that marks its entry deprecated.

    ``true`` and a non-empty message do; ``false``, ``null``, ``""`` and
    anything that is not a boolean or a string do not.
    """
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value != ""


def entry_identifiers(raw: Any, identifier_field: str) -> Tuple[str, ...]:
    """Collect the stable identifiers of a raw entry.

    A set token has no identifier of its own; each of its members carries
    one, and any of them identifies the token.
    """
    if not isinstance(raw, Mapping):
        return ()

    found: List[str] = []
    own = raw.get(identifier_field)
    if isinstance(own, str) and own:
        found.append(own)

    sets = raw.get("sets")
    if isinstance(sets, Mapping):
        for member in sets.values():
            if isinstance(member, Mapping):
                member_id = member.get(identifier_field)
                if isinstance(member_id, str) and member_id and member_id not in found:
                    found.append(member_id)

    return tuple(found)


@dataclass
class TokenEntry:
    """A design token: a value (or reference), identity and deprecation state."""

    name: str
    raw: Dict[str, Any]
    value: Any = None
    identifiers: Tuple[str, ...] = ()
    deprecated: Union[bool, str, None] = None
    deprecated_comment: Optional[str] = None
    reference: Optional[ReferenceMarker] = None

    @property
    def identifier(self) -> Optional[str]:
        return self.identifiers[0] if self.identifiers else None

    @property
    def is_deprecated(self) -> bool:
        return is_deprecated_marker(self.deprecated)

    @property
    def is_set(self) -> bool:
        return "sets" in self.raw


@dataclass
class PropertySpec:
    """One named property of a definition."""

    name: str
    type: Any = None
    enum: Optional[List[Any]] = None
    default: Any = None
    has_default: bool = False
    description: Optional[str] = None


@dataclass
class DefinitionEntry:
    """A structural definition such as a component schema."""

    name: str
    raw: Dict[str, Any]
    title: Optional[str] = None
    schema_id: Optional[str] = None
    identifiers: Tuple[str, ...] = ()
    properties: Dict[str, PropertySpec] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)

    @property
    def identifier(self) -> Optional[str]:
        return self.identifiers[0] if self.identifiers else None


Entry = Union[TokenEntry, DefinitionEntry]


@dataclass
class Dataset:
    """One read-only snapshot: entry name -> typed entry.

    ``failures`` holds the entries that did not pass validation; they take
    no part in the comparison but are surfaced in the report.
    """

    kind: DatasetKind
    entries: Dict[str, Entry] = field(default_factory=dict)
    failures: Dict[str, MalformedEntryError] = field(default_factory=dict)
    source: str = ""
    _by_identifier: Optional[Dict[str, str]] = field(default=None, repr=False, compare=False)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __getitem__(self, name: str) -> Entry:
        return self.entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, name: str) -> Optional[Entry]:
        return self.entries.get(name)

    def raw(self) -> Dict[str, Any]:
        """Name -> raw JSON mapping, the view the structural differ walks."""
        return {name: entry.raw for name, entry in self.entries.items()}

    def find(self, target: str, by: str = "identifier") -> Optional[Entry]:
        """Look an entry up by identifier (falling back to name) or by name."""
        if by == "identifier":
            name = self._identifier_index().get(target)
            if name is not None:
                return self.entries[name]
        return self.entries.get(target)

    def _identifier_index(self) -> Dict[str, str]:
        if self._by_identifier is None:
            index: Dict[str, str] = {}
            for name, entry in self.entries.items():
                for identifier in entry.identifiers:
                    index.setdefault(identifier, name)
            self._by_identifier = index
        return self._by_identifier
