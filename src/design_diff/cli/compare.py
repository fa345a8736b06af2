"""Comparison commands — ``tokens`` and ``components``.

Both take two sources (a directory, a JSON file or ``git:<ref>``), load
them side by side and print the report as rich tables or JSON.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..api import compare_definition_sources, compare_token_sources
from ..exceptions import DesignDiffError
from ..formatters import get_formatter
from ..formatters.base import AnyReport
from ..formatters.json_formatter import JsonFormatter
from ..logging_config import setup_logging
from . import app
from ._common import console, err_console, parse_source, resolve_config

# Exit status for --fail-on-breaking; 1 is reserved for errors
BREAKING_EXIT_CODE = 2

OLD_HELP = "Original version: directory, JSON file or git:<ref>"
NEW_HELP = "Updated version: directory, JSON file or git:<ref>"


def _emit(report: AnyReport, json_output: bool, verbose: bool, output: Optional[Path]) -> None:
    formatter = get_formatter("json" if json_output else "rich", console=console, verbose=verbose)
    formatter.render(report)
    if output is not None:
        output.write_text(JsonFormatter().format(report) + "\n", encoding="utf-8")
        err_console.print(f"[blue]Report saved to: {output}[/blue]")


@app.command(name="tokens")
def tokens(
    old: str = typer.Argument(..., help=OLD_HELP),
    new: str = typer.Argument(..., help=NEW_HELP),
    repo: Optional[Path] = typer.Option(
        None,
        "--repo",
        help="Git repository for git:<ref> sources (default: current directory)",
    ),
    path: Optional[str] = typer.Option(
        None,
        "--path",
        "-p",
        help="Sub-directory holding the token files",
    ),
    names: Optional[List[str]] = typer.Option(
        None,
        "--file",
        "-f",
        help="Only compare these files (repeatable)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the JSON report to this file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show values and debug logging",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
) -> None:
    """Compare two versions of a design-token set.

    Reports added, deleted, renamed, newly deprecated and updated tokens.
    Renames are detected through the tokens' stable identifiers.

    [bold cyan]Examples:[/bold cyan]

      design-diff tokens tokens-v1/ tokens-v2/

      design-diff tokens git:v13.0.0 git:main --path packages/tokens/src

      design-diff tokens old.json new.json --json
    """
    logger = setup_logging(verbose=verbose)

    try:
        settings = resolve_config(config=config)
        original = parse_source(old, repo, path, settings)
        updated = parse_source(new, repo, path, settings)
        report = compare_token_sources(original, updated, names=names or None, config=settings)
        _emit(report, json_output, verbose, output)

    except typer.Exit:
        raise
    except DesignDiffError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error in tokens")
        err_console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            err_console.print_exception()
        raise typer.Exit(1)


@app.command(name="components")
def components(
    old: str = typer.Argument(..., help=OLD_HELP),
    new: str = typer.Argument(..., help=NEW_HELP),
    repo: Optional[Path] = typer.Option(
        None,
        "--repo",
        help="Git repository for git:<ref> sources (default: current directory)",
    ),
    path: Optional[str] = typer.Option(
        None,
        "--path",
        "-p",
        help="Sub-directory holding the schema files",
    ),
    names: Optional[List[str]] = typer.Option(
        None,
        "--file",
        "-f",
        help="Only compare these files (repeatable)",
    ),
    breaking_only: bool = typer.Option(
        False,
        "--breaking-only",
        help="Only report breaking changes",
    ),
    fail_on_breaking: bool = typer.Option(
        False,
        "--fail-on-breaking",
        help=f"Exit with status {BREAKING_EXIT_CODE} when breaking changes are found",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the JSON report to this file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show raw change records and debug logging",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
) -> None:
    """Compare two versions of the component schemas.

    Each schema file is one definition, named by its file stem. Updates are
    classified as breaking (removed properties or enum values, newly
    required fields, changed title or schema) or non-breaking.

    [bold cyan]Examples:[/bold cyan]

      design-diff components schemas-v1/ schemas-v2/

      design-diff components git:main git:HEAD --path packages/component-schemas/schemas/components

      design-diff components old/ new/ --fail-on-breaking --json
    """
    logger = setup_logging(verbose=verbose)

    try:
        settings = resolve_config(config=config)
        original = parse_source(old, repo, path, settings)
        updated = parse_source(new, repo, path, settings)
        report = compare_definition_sources(original, updated, names=names or None, config=settings)
        has_breaking = report.has_breaking_changes
        if breaking_only:
            report = report.breaking_only()
        _emit(report, json_output, verbose, output)

    except typer.Exit:
        raise
    except DesignDiffError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error in components")
        err_console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            err_console.print_exception()
        raise typer.Exit(1)

    if fail_on_breaking and has_breaking:
        raise typer.Exit(BREAKING_EXIT_CODE)
