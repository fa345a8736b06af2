"""Engine exceptions: reference resolution, entry shape, dataset availability.

Everything except ``DatasetUnavailableError`` is local to one entry. The
assembler records those per entry and keeps going.
"""

from typing import Optional, Sequence

from .base import DesignDiffError


class ResolutionError(DesignDiffError):
    """Base class for reference resolution failures."""

    def __init__(self, message: str, target: str, chain: Sequence[str], **details: str):
        super().__init__(
            message,
            details={"target": target, "chain": " -> ".join(chain), **details},
        )
        self.target = target
        self.chain = list(chain)


class CircularReferenceError(ResolutionError):
    """Raised when a reference chain revisits an entry it already passed."""

    def __init__(self, target: str, chain: Sequence[str]):
        super().__init__(f"Circular reference at {target}", target, chain)


class TargetNotFoundError(ResolutionError):
    """Raised when a reference points to an entry that does not exist."""

    def __init__(self, target: str, chain: Sequence[str]):
        super().__init__(f"Reference target not found: {target}", target, chain)


class MalformedEntryError(DesignDiffError):
    """Raised when an entry violates the minimal shape for its dataset kind."""

    def __init__(self, name: object, reason: str):
        super().__init__(
            f"Malformed entry: {name!r}",
            details={"name": str(name), "reason": reason},
        )
        self.name = name
        self.reason = reason


class DatasetUnavailableError(DesignDiffError):
    """Raised when a whole dataset side cannot be loaded.

    Comparison needs two complete datasets, so this one is fatal.
    """

    def __init__(self, source: str, reason: str, side: Optional[str] = None):
        details = {"source": source, "reason": reason}
        if side:
            details["side"] = side

        super().__init__(f"Dataset unavailable: {source}", details=details)
        self.source = source
        self.reason = reason
        self.side = side
