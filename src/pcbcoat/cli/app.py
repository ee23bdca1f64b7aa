"""CLI application entry point for pcbcoat.

This module provides the main CLI interface using Typer.
"""

import asyncio
import time
from pathlib import Path
from typing import Annotated

import typer

from pcbcoat import __version__
from pcbcoat.cli.output import (
    SYM_OK,
    console,
    create_progress,
    print_cancellation_notice,
    print_error,
    print_header,
    print_project_info,
    print_shape_breakdown,
    print_step,
    print_success,
)
from pcbcoat.config import (
    CoatingAppSettings,
    LoggingConfig,
    PlannerConfig,
    TravelAvoidanceStrategy,
)
from pcbcoat.core import CoatingGCodeGenerator
from pcbcoat.core.snippets import compose
from pcbcoat.domain import GCodeSnippet, Shape
from pcbcoat.exceptions import CoatingError, EmptyGCodeError, GCodeWriteError, ProjectLoadError
from pcbcoat.io import GCodeWriter, ProjectReader, read_snippets
from pcbcoat.utils.logging import configure_logging

# Create the Typer app
app = typer.Typer(
    name="pcbcoat",
    help="Generate coating G-code from a board layout project.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]pcbcoat[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def generate(
    project: Annotated[
        Path,
        typer.Argument(
            help="Path to the layout project JSON file",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}.gcode)",
        ),
    ] = None,
    snippets_file: Annotated[
        Path | None,
        typer.Option(
            "--snippets",
            "-s",
            help="JSON file with G-code snippets (list or settings object)",
        ),
    ] = None,
    strategy: Annotated[
        str | None,
        typer.Option(
            "--strategy",
            help="Travel avoidance strategy override (contour|lift|zlift)",
        ),
    ] = None,
    zones: Annotated[
        int,
        typer.Option(
            "--zones",
            "-k",
            help="Number of k-means zones per shape",
            min=1,
            max=64,
        ),
    ] = 5,
    job_hooks: Annotated[
        bool,
        typer.Option(
            "--job-hooks",
            help="Also emit beforeJob/afterJob snippets",
        ),
    ] = False,
    no_masking: Annotated[
        bool,
        typer.Option(
            "--no-masking",
            help="Ignore masking shapes",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show the shape breakdown without generating G-code",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Generate coating G-code for the shapes of a layout project.

    Fill and outline shapes are coated in coating order; masking shapes
    are kept clear of the nozzle and routed around during travel.

    Example:
        pcbcoat board.json

    This will create board.gcode next to the project file.
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not project.exists():
        print_error(
            f"Input file not found: {project}",
            details=f"The file '{project}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not project.is_file():
        print_error(
            f"Input path is not a file: {project}",
            details="Please provide a path to a project JSON file.",
        )
        raise typer.Exit(code=1)

    strategy_override: TravelAvoidanceStrategy | None = None
    if strategy is not None:
        value = strategy.lower()
        try:
            strategy_override = TravelAvoidanceStrategy(
                "lift" if value == "zlift" else value
            )
        except ValueError:
            print_error(
                f"Invalid strategy: {strategy}",
                details="Valid values: contour, lift, zlift",
            )
            raise typer.Exit(code=1)

    app_settings = CoatingAppSettings(
        planner=PlannerConfig(zone_count=zones),
        logging=LoggingConfig(
            log_file=log_file,
            log_level="DEBUG" if verbose else log_level,
        ),
    )
    logger = configure_logging(
        log_file=app_settings.logging.log_file,
        console_level=app_settings.logging.log_level,
        file_level=app_settings.logging.file_log_level,
        quiet=quiet,
    )

    if not quiet:
        print_header(__version__)

    try:
        if not quiet:
            print_step("Loading project")

        reader = ProjectReader(project)
        reader.load()
        shapes = reader.shapes

        overrides: dict[str, object] = {}
        if strategy_override is not None:
            overrides["travel_avoidance_strategy"] = strategy_override
        if no_masking:
            overrides["enable_masking"] = False
        settings = reader.settings.model_copy(update=overrides)

        snippets: list[GCodeSnippet] = reader.snippets
        if snippets_file is not None:
            snippets = read_snippets(snippets_file)

        if not quiet:
            print_project_info(str(project), reader.version, shapes, settings)

        if dry_run:
            _handle_dry_run(shapes, snippets, quiet, verbose)
            raise typer.Exit(code=0)

        actual_output_path = output or GCodeWriter.get_output_path(project)
        generator = CoatingGCodeGenerator(settings, app_settings.planner, logger)

        if not quiet:
            print_step("Generating")

        started = time.perf_counter()
        try:
            if not quiet:
                with create_progress() as progress:
                    task_id = progress.add_task("Analyzing paths...", total=100)

                    def update_progress(percent: float, message: str) -> None:
                        progress.update(task_id, completed=percent, description=message)

                    body = asyncio.run(generator.generate(shapes, update_progress))
            else:
                body = asyncio.run(generator.generate(shapes))
        except KeyboardInterrupt:
            if not quiet:
                print_cancellation_notice()
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        if not body.strip():
            raise EmptyGCodeError()
        gcode = compose(body, snippets, settings, job_hooks=job_hooks)

        writer = GCodeWriter(actual_output_path)
        writer.write(gcode)
        elapsed = time.perf_counter() - started

        if not quiet:
            stats = generator.generation_logger.stats
            print_success(
                output_path=str(actual_output_path),
                file_size=_format_file_size(actual_output_path),
                total_time_s=elapsed,
                lines=generator.line_count,
                nozzle_cycles=generator.nozzle_cycles,
                shapes=stats.shapes_processed,
                detours=stats.detours,
                z_lifts=stats.z_lifts,
            )

    except ProjectLoadError as e:
        print_error(f"Could not load project: {e.reason}")
        raise typer.Exit(code=1)
    except GCodeWriteError as e:
        print_error(f"Could not write G-code: {e.reason}")
        raise typer.Exit(code=1)
    except CoatingError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _handle_dry_run(
    shapes: list[Shape], snippets: list[GCodeSnippet], quiet: bool, verbose: bool
) -> None:
    """Handle --dry-run mode.

    Args:
        shapes: Project shapes
        snippets: Snippets that would wrap the body
        quiet: Suppress output
        verbose: Show verbose output
    """
    if quiet:
        return

    print_step("Analyzing (dry run)")
    print_shape_breakdown(shapes, verbose)

    enabled = [snippet for snippet in snippets if snippet.enabled]
    console.print(f"\n  {len(enabled)} enabled snippets")
    if verbose:
        for snippet in sorted(enabled, key=lambda s: (s.hook.value, s.order)):
            console.print(f"  {snippet.hook.value}: {snippet.name}")

    console.print(f"\n[bold green]{SYM_OK} Dry run complete[/bold green] - no G-code written")


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "42 KB")
    """
    try:
        size_bytes = path.stat().st_size
    except OSError:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
