"""Command-line interface for Doxadoc."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from . import context
from .config import DoxadocConfig
from .diagnostics import Diagnostics
from .document import render_document
from .exceptions import DoxadocError
from .loader import discover_config, load_records
from .logger import get_logger, setup_logger
from .resolver import resolve_hierarchy

app = typer.Typer(
    name="doxadoc",
    help="Convert Doxygen XML output into a single AsciiDoc reference manual",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: doxadoc.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for doxadoc commands."""
    setup_logger(verbose)
    context.set_config_path(config)


def _load_config(input_path: Path) -> DoxadocConfig:
    try:
        config = discover_config(input_path)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: Invalid configuration: {e}", err=True)
        raise typer.Exit(1) from e
    return config or DoxadocConfig()


@app.command()
def convert(
    input_path: Annotated[
        Path,
        typer.Argument(help="Doxygen XML directory, index.xml or YAML record dump"),
    ],
    *,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    title: Annotated[
        str | None, typer.Option("--title", help="Project title (overrides config)")
    ] = None,
    strict: Annotated[
        bool, typer.Option("--strict", help="Fail when any input problem was tolerated")
    ] = False,
) -> None:
    """Generate the AsciiDoc reference manual."""
    document_config = _load_config(input_path).document
    updates: dict[str, object] = {}
    if title is not None:
        updates["title"] = title
    if strict:
        updates["strict"] = True
    if updates:
        document_config = document_config.model_copy(update=updates)

    logger = get_logger()
    diagnostics = Diagnostics(logger)
    try:
        records = load_records(input_path, diagnostics=diagnostics, logger=logger)
        result = render_document(
            records, document_config, diagnostics=diagnostics, logger=logger
        )
    except DoxadocError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    if output:
        output.write_text(result.text, encoding="utf-8")
        typer.echo(f"Documentation written to {output}")
    else:
        typer.echo(result.text, nl=False)


@app.command()
def check(
    input_path: Annotated[
        Path,
        typer.Argument(help="Doxygen XML directory, index.xml or YAML record dump"),
    ],
) -> None:
    """Resolve the group hierarchy and report input problems."""
    document_config = _load_config(input_path).document

    logger = get_logger()
    diagnostics = Diagnostics(logger)
    try:
        records = load_records(input_path, diagnostics=diagnostics, logger=logger)
        readme = records.get_compound_by_name(document_config.readme_page)
        tree = resolve_hierarchy(
            records,
            diagnostics,
            standalone_pages={page.id for page in readme.pages} if readme else (),
            logger=logger,
        )
    except DoxadocError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(f"Groups ({len(tree)}):")
    for group, depth in tree.walk():
        typer.echo(f"{'  ' * depth}{group.name}")

    if diagnostics:
        typer.echo(f"\nProblems ({len(diagnostics)}):")
        for diagnostic in diagnostics:
            typer.echo(f"  {diagnostic}")
        raise typer.Exit(1)

    typer.echo("\nNo problems found")


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
