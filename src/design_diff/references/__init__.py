"""Reference (alias) resolution across dataset entries."""

from .resolver import Resolution, resolve_all, resolve_entry, resolve_reference

__all__ = ["Resolution", "resolve_all", "resolve_entry", "resolve_reference"]
