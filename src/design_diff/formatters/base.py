"""Base formatter interface for design-diff output rendering."""

from abc import ABC, abstractmethod
from typing import Union

from ..report.models import Report, TokenReport

AnyReport = Union[Report, TokenReport]


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, report: AnyReport) -> None:
        """Write the report to the formatter's output."""

    @abstractmethod
    def format(self, report: AnyReport) -> str:
        """Return formatted string representation of the report."""
