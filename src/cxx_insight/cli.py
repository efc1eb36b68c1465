"""Command-line interface for CXX Insight"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import load_config
from .engine import AnalysisEngine
from .exceptions import CxxInsightError
from .formatters import get_formatter
from .logging_config import setup_logging
from .reporting import ReportingFacade
from .scanning import expand_paths

app = typer.Typer(
    name="cxx-insight",
    help="CXX Insight - C++ function complexity, size and documentation metrics",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

VALID_FORMATS = ("rich", "json")


@app.command()
def analyze(
    paths: List[Path] = typer.Argument(
        ...,
        help="C++ files or directories to analyze",
        exists=True,
        readable=True,
    ),
    cyclomatic_threshold: Optional[int] = typer.Option(
        None,
        "--cyclomatic-threshold",
        help="Functions above this cyclomatic complexity are complex (default: 10)",
        min=0,
    ),
    cognitive_threshold: Optional[int] = typer.Option(
        None,
        "--cognitive-threshold",
        help="Raise an issue above this cognitive complexity (default: 15)",
        min=0,
    ),
    size_threshold: Optional[int] = typer.Option(
        None,
        "--size-threshold",
        help="Functions with more body lines than this are big (default: 20)",
        min=0,
    ),
    secondary_locations: Optional[bool] = typer.Option(
        None,
        "--secondary-locations/--no-secondary-locations",
        help="Attach every complexity increment to cognitive complexity issues",
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (default), json",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Number of parallel workers (default: auto-detect)",
        min=1,
        max=32,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
    fail_on_issues: bool = typer.Option(
        False,
        "--fail-on-issues",
        help="Exit 1 if any issue was raised (for CI gating)",
    ),
):
    """
    Measure complexity, size and API documentation of C++ code.

    [bold cyan]Examples:[/bold cyan]

      cxx-insight analyze src/

      cxx-insight analyze include/ src/ --cognitive-threshold 18

      cxx-insight analyze widget.cc --format json | jq .module

      cxx-insight analyze src/ --fail-on-issues --secondary-locations
    """
    if verbose and quiet:
        console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)

    if fmt not in VALID_FORMATS:
        console.print(f"[red]Error:[/red] --format must be one of: {', '.join(VALID_FORMATS)}")
        raise typer.Exit(1)

    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = load_config(
            config_file=config,
            cyclomatic_threshold=cyclomatic_threshold,
            cognitive_threshold=cognitive_threshold,
            size_threshold=size_threshold,
            secondary_locations=secondary_locations,
            workers=workers,
            verbose=verbose,
            quiet=quiet,
        )
        logger.debug(f"Loaded config: {settings}")

        files = expand_paths(paths, settings.analyzed_suffixes)
        if not files:
            console.print("[yellow]No C++ files found.[/yellow]")
            raise typer.Exit(0)

        engine = AnalysisEngine(settings)
        context = engine.analyze_files(files)
        report = ReportingFacade(context).build_report()

        get_formatter(fmt).render(report)

        if fail_on_issues and report.issue_count > 0:
            if fmt == "rich":
                console.print(f"\n[red]FAIL:[/red] {report.issue_count} issue(s) raised")
            raise typer.Exit(1)

    except typer.Exit:
        raise

    except CxxInsightError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


@app.command()
def version():
    """Show version and exit."""
    console.print(f"[bold cyan]CXX Insight[/bold cyan] version [green]{__version__}[/green]")


def main():
    app()


if __name__ == "__main__":
    main()
