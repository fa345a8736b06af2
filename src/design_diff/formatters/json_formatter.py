"""JSON formatter for design-diff."""

import json

from .base import AnyReport, BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render reports as JSON.

    Keys are sorted so the same comparison always produces the same bytes.
    """

    def render(self, report: AnyReport) -> None:
        print(self.format(report))

    def format(self, report: AnyReport) -> str:
        return json.dumps(report.to_dict(), indent=2, sort_keys=True, ensure_ascii=False)
