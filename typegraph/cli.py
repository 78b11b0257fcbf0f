"""Main CLI application."""

import os
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from .config import BuildSettings, apply_overrides, load_settings
from .errors import TypeGraphError
from .graph import TypeGraphBuilder
from .log_setup import setup_logging
from .output import print_hierarchy_tree
from .provider import PythonModelProvider

app = typer.Typer(
    name="typegraph",
    help="Build a graph of type inheritances in your Python app.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
err_console = Console(stderr=True)


def _fail(error: Exception) -> NoReturn:
    err_console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(1)


def canonicalize(paths: Optional[list[Path]]) -> list[Path]:
    """Return absolute, normalized versions of the given paths."""
    return [Path(os.path.abspath(p)) for p in paths or []]


def create_builder(paths: Optional[list[Path]], settings: BuildSettings) -> TypeGraphBuilder:
    """Create a graph builder for the canonicalized paths."""
    return TypeGraphBuilder(
        canonicalize(paths),
        provider=PythonModelProvider(ancestors=settings.ancestors),
        name=settings.name,
        workers=settings.workers,
        exclude=settings.exclude,
    )


@app.command()
def build(
    paths: Optional[list[Path]] = typer.Argument(None, help="Source files or directories to analyse"),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="The file to output the graph data to [default: output.gv, '-' for stdout]"
    ),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: dot or json [default: dot]"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Graph name [default: analysed path names]"),
    ancestors: Optional[str] = typer.Option(
        None, "--ancestors", "-a", help="Supertypes per type: direct or all [default: direct]"
    ),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Maximum number of analysis threads"),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-x", help="Name pattern to skip while walking directories and resolving imports (repeatable)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to JSON config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Whether to be verbose"),
):
    """Build the type graph of the given files and directories.

    Directories are traversed recursively to find source files. The graph
    is written in Graphviz DOT format unless --format json is given.

    Example:
        typegraph build src/ -o hierarchy.gv
        dot -Tsvg hierarchy.gv -o hierarchy.svg
    """
    try:
        settings = apply_overrides(
            load_settings(config),
            output=output,
            format=fmt,
            name=name,
            ancestors=ancestors,
            workers=workers,
            exclude=exclude or None,
            verbose=verbose or None,
        )
        setup_logging(settings.verbose, err_console)

        builder = create_builder(paths, settings)
        destination = sys.stdout.buffer if settings.output == "-" else Path(settings.output)
        builder.write(destination, fmt=settings.format)
    except TypeGraphError as e:
        _fail(e)


@app.command()
def tree(
    paths: Optional[list[Path]] = typer.Argument(None, help="Source files or directories to analyse"),
    ancestors: Optional[str] = typer.Option(
        None, "--ancestors", "-a", help="Supertypes per type: direct or all [default: direct]"
    ),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-x", help="Name pattern to skip while walking directories and resolving imports (repeatable)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to JSON config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Whether to be verbose"),
):
    """Print the type hierarchy as a tree, supertypes first."""
    try:
        settings = apply_overrides(
            load_settings(config),
            ancestors=ancestors,
            exclude=exclude or None,
            verbose=verbose or None,
        )
        setup_logging(settings.verbose, err_console)

        builder = create_builder(paths, settings)
        display = builder.display_graph()
        print_hierarchy_tree(display, console, title=builder.graph_name or "Types")
    except TypeGraphError as e:
        _fail(e)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
