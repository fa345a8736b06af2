"""Resolve CLI command — follow an alias chain to its concrete value."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..dataset.loader import load_dataset
from ..dataset.models import DEFINITIONS, TOKENS
from ..diff.models import to_jsonable
from ..exceptions import DesignDiffError
from ..logging_config import setup_logging
from ..references import resolve_all, resolve_entry
from . import app
from ._common import console, err_console, parse_source, resolve_config


@app.command(name="resolve")
def resolve(
    source: str = typer.Argument(..., help="Directory, JSON file or git:<ref>"),
    name: Optional[str] = typer.Argument(
        None,
        help="Entry to resolve; omit to check every entry",
    ),
    definitions: bool = typer.Option(
        False,
        "--definitions",
        help="Treat the source as component schemas instead of tokens",
    ),
    repo: Optional[Path] = typer.Option(
        None,
        "--repo",
        help="Git repository for git:<ref> sources (default: current directory)",
    ),
    path: Optional[str] = typer.Option(
        None,
        "--path",
        "-p",
        help="Sub-directory holding the dataset files",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
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
    """Resolve a token alias to its concrete value.

    With no NAME, every entry is resolved and the broken chains (cycles and
    dangling references) are listed; the exit status is 1 if any exist.

    [bold cyan]Examples:[/bold cyan]

      design-diff resolve tokens/ accent-background-color-default

      design-diff resolve git:main --path packages/tokens/src
    """
    logger = setup_logging(verbose=verbose)

    try:
        settings = resolve_config(config=config)
        dataset_source = parse_source(source, repo, path, settings)
        kind = DEFINITIONS if definitions else TOKENS
        dataset = load_dataset(dataset_source, dataset_source.list_files(), kind, settings)

        if name is not None:
            resolution = resolve_entry(name, dataset)
            if json_output:
                print(json.dumps(
                    {"name": name, "value": to_jsonable(resolution.value), "chain": resolution.chain},
                    indent=2,
                    sort_keys=True,
                ))
            else:
                console.print(" -> ".join(escape(hop) for hop in resolution.chain))
                console.print(escape(json.dumps(to_jsonable(resolution.value), sort_keys=True)))
            return

        resolved, failures = resolve_all(dataset)
        if json_output:
            print(json.dumps(
                {
                    "resolved": len(resolved),
                    "failures": {n: e.to_dict() for n, e in failures.items()},
                },
                indent=2,
                sort_keys=True,
            ))
        elif failures:
            table = Table(title=f"[bold red]Broken references[/bold red] ({len(failures)})", title_justify="left")
            table.add_column("Entry")
            table.add_column("Problem", style="red")
            table.add_column("Chain", style="dim")
            for entry_name, error in failures.items():
                table.add_row(escape(entry_name), escape(error.message), escape(" -> ".join(error.chain)))
            console.print(table)
        else:
            console.print(f"[green]All {len(resolved)} entries resolve.[/green]")

    except typer.Exit:
        raise
    except DesignDiffError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error in resolve")
        err_console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            err_console.print_exception()
        raise typer.Exit(1)

    if failures:
        raise typer.Exit(1)
