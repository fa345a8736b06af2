"""Rich terminal formatter for comparison reports.

Definition reports get a summary line and one table per bucket, breaking
rows in red. Token reports get one table per category.
"""

import json
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..classify.models import DefinitionChange
from ..diff.models import to_jsonable
from ..report.models import EntryFailure, Report, TokenChange, TokenReport
from .base import AnyReport, BaseFormatter

_KIND_MARKS = {
    "added": "[green]+[/green]",
    "deleted": "[red]-[/red]",
    "updated": "[yellow]~[/yellow]",
}


def _short(value: Any, limit: int = 60) -> str:
    """Compact one-line JSON for table cells."""
    text = json.dumps(to_jsonable(value), sort_keys=True, ensure_ascii=False)
    if len(text) > limit:
        text = text[: limit - 3] + "..."
    return escape(text)


class RichFormatter(BaseFormatter):
    """Render reports to a Rich console.

    Usage::

        formatter = RichFormatter()
        formatter.render(report)
    """

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self._console = console or Console()
        self._verbose = verbose

    # ── Public API ───────────────────────────────────────────────────────

    def render(self, report: AnyReport) -> None:
        if isinstance(report, TokenReport):
            self._render_tokens(report)
        else:
            self._render_definitions(report)

    def format(self, report: AnyReport) -> str:
        with self._console.capture() as capture:
            self.render(report)
        return capture.get()

    # ── Definitions ──────────────────────────────────────────────────────

    def _render_definitions(self, report: Report) -> None:
        con = self._console
        summary = report.summary
        con.print()

        if summary.has_breaking_changes:
            verdict = f"[bold red]{summary.breaking_changes} breaking change(s)[/bold red]"
        else:
            verdict = "[bold green]No breaking changes[/bold green]"
        con.print(f"[bold cyan]DEFINITION DIFF[/bold cyan]  {verdict}")
        con.print(
            f"  [dim]{summary.added} added, {summary.deleted} deleted, "
            f"{summary.updated} updated, {summary.renamed} renamed[/dim]"
        )
        con.print()

        if not (report.added or report.deleted or report.breaking
                or report.non_breaking or report.renamed):
            con.print("  [dim]No changes.[/dim]")

        if report.deleted:
            self._name_table("Deleted", report.deleted, "red")
        if report.breaking:
            self._change_table("Updated (breaking)", report.breaking)
        if report.renamed:
            self._change_table("Renamed", report.renamed)
        if report.non_breaking:
            self._change_table("Updated (non-breaking)", report.non_breaking)
        if report.added:
            self._name_table("Added", report.added, "green")

        self._render_errors(report.errors)

    def _name_table(self, title: str, entries: Dict[str, Any], color: str) -> None:
        table = Table(title=f"[bold {color}]{title}[/bold {color}] ({len(entries)})", title_justify="left")
        table.add_column("Name", style=color)
        if self._verbose:
            table.add_column("Value", style="dim")
        for name, value in entries.items():
            if self._verbose:
                table.add_row(name, _short(value))
            else:
                table.add_row(name)
        self._console.print(table)

    def _change_table(self, title: str, changes: Dict[str, DefinitionChange]) -> None:
        table = Table(title=f"[bold]{title}[/bold] ({len(changes)})", title_justify="left")
        table.add_column("Name")
        table.add_column("Breaking", justify="center")
        table.add_column("Details")

        for name, change in changes.items():
            label = f"{change.renamed_from} -> {name}" if change.renamed_from else name
            flag = "[red]yes[/red]" if change.is_breaking else "[green]no[/green]"
            table.add_row(label, flag, "\n".join(self._details(change)))
        self._console.print(table)

    def _details(self, change: DefinitionChange) -> List[str]:
        lines = [f"[red]{escape(reason)}[/red]" for reason in change.reasons]
        for prop, pc in change.property_changes.items():
            if pc.changes:
                lines.append(escape(f"{prop}: {'; '.join(pc.changes)}"))
        if self._verbose:
            partition = change.changes
            for kind, records in (("added", partition.added), ("deleted", partition.deleted),
                                  ("updated", partition.updated)):
                for key, value in records.items():
                    lines.append(f"{_KIND_MARKS[kind]} {key}: {_short(value)}")
        return lines or ["[dim]-[/dim]"]

    # ── Tokens ───────────────────────────────────────────────────────────

    def _render_tokens(self, report: TokenReport) -> None:
        con = self._console
        totals = report.totals()
        con.print()
        con.print("[bold cyan]TOKEN DIFF[/bold cyan]")
        con.print("  [dim]" + ", ".join(f"{count} {name}" for name, count in totals.items()) + "[/dim]")
        con.print()

        if not report.has_changes:
            con.print("  [dim]No changes.[/dim]")

        if report.renamed:
            table = Table(title=f"[bold]Renamed[/bold] ({len(report.renamed)})", title_justify="left")
            table.add_column("Old name", style="dim")
            table.add_column("New name", style="bold")
            for new_name, record in report.renamed.items():
                table.add_row(record.old_name, new_name)
            con.print(table)

        if report.deprecated:
            table = Table(title=f"[bold yellow]Deprecated[/bold yellow] ({len(report.deprecated)})",
                          title_justify="left")
            table.add_column("Name", style="yellow")
            table.add_column("Comment")
            for name, info in report.deprecated.items():
                table.add_row(name, info.get("comment") or "")
            con.print(table)

        if report.deleted:
            self._name_table("Deleted", report.deleted, "red")
        if report.added:
            self._name_table("Added", report.added, "green")
        if report.updated:
            self._token_updates(report.updated)

        self._render_errors(report.errors)

    def _token_updates(self, updated: Dict[str, List[TokenChange]]) -> None:
        table = Table(title=f"[bold]Updated[/bold] ({len(updated)})", title_justify="left")
        table.add_column("Token")
        table.add_column("Path", style="dim")
        table.add_column("Before")
        table.add_column("After")
        for name, changes in updated.items():
            for i, change in enumerate(changes):
                table.add_row(
                    name if i == 0 else "",
                    f"{_KIND_MARKS[change.kind]} {'.'.join(change.path)}",
                    _short(change.original_value, 40),
                    _short(change.new_value, 40),
                )
        self._console.print(table)

    # ── Errors ───────────────────────────────────────────────────────────

    def _render_errors(self, errors: List[EntryFailure]) -> None:
        if not errors:
            return
        con = self._console
        con.print()
        con.print(f"[bold yellow]SKIPPED[/bold yellow] [dim]({len(errors)})[/dim]")
        for failure in errors:
            side = f" [dim]({failure.side})[/dim]" if failure.side else ""
            con.print(f"  [yellow]![/yellow] {escape(failure.name)}{side}: {escape(failure.message)}")
