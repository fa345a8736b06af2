"""Output formatters for design-diff."""

from typing import Optional

from rich.console import Console

from .base import AnyReport, BaseFormatter
from .json_formatter import JsonFormatter
from .rich_formatter import RichFormatter


def get_formatter(name: str, console: Optional[Console] = None, verbose: bool = False) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "rich", "json"
        console: Console for rich output (ignored by "json")
        verbose: Show per-change details in rich output

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    if name == "json":
        return JsonFormatter()
    if name == "rich":
        return RichFormatter(console=console, verbose=verbose)
    raise ValueError(f"Unknown formatter: {name!r}. Choose from: json, rich")


__all__ = [
    "AnyReport",
    "BaseFormatter",
    "JsonFormatter",
    "RichFormatter",
    "get_formatter",
]
