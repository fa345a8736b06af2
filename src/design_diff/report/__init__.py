"""Comparison reports and the assembler that builds them."""

from .assembler import compare_definitions, compare_tokens, token_changes
from .models import EntryFailure, Report, Summary, TokenChange, TokenReport

__all__ = [
    "EntryFailure",
    "Report",
    "Summary",
    "TokenChange",
    "TokenReport",
    "compare_definitions",
    "compare_tokens",
    "token_changes",
]
