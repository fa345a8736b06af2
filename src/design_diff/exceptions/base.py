"""Base exception for design-diff."""

from typing import Any, Dict, Optional


class DesignDiffError(Exception):
    """Base exception for all design-diff errors.

    ``details`` holds flat string context (names, paths, chains) that the
    CLI prints after the message and JSON reports embed as-is.
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({context})"

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form: error class, message and details."""
        return {"error": type(self).__name__, "message": self.message, **self.details}
