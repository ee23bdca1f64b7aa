"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from collections import Counter

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from pcbcoat.config.settings import GcodeSettings
from pcbcoat.domain import Shape

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for G-code generation.

    Returns:
        Configured Progress instance with status text, bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        TextColumn("{task.description}"),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]pcbcoat[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_project_info(
    project_path: str,
    version: int,
    shapes: list[Shape],
    settings: GcodeSettings,
) -> None:
    """Print project information.

    Args:
        project_path: Path to the project file
        version: Project file version
        shapes: Shapes of the project
        settings: Coating settings in effect
    """
    coating = sum(1 for shape in shapes if shape.is_coating)
    masks = sum(1 for shape in shapes if shape.is_mask)
    skipped = sum(1 for shape in shapes if shape.skip_coating)

    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(project_path)
    line1.append(f" (v{version})")
    console.print(line1)
    console.print(
        f"  {len(shapes)} shapes {SYM_DOT} {coating} to coat {SYM_DOT} "
        f"{masks} masks {SYM_DOT} {skipped} skipped"
    )
    area = settings.work_area
    console.print(
        f"  Work area {area.width:g} x {area.height:g} {settings.unit.value} {SYM_DOT} "
        f"masking {'on' if settings.enable_masking else 'off'} {SYM_DOT} "
        f"travel {settings.travel_avoidance_strategy.value}"
    )


def print_shape_breakdown(shapes: list[Shape], verbose: bool) -> None:
    """Print a table of shapes grouped by kind and coating type.

    Args:
        shapes: Shapes of the project
        verbose: Whether to list every shape
    """
    counts = Counter(
        (shape.kind.value, shape.coating_type.value if shape.coating_type else "none")
        for shape in shapes
        if not shape.skip_coating
    )

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Kind")
    table.add_column("Coating")
    table.add_column("Count", justify="right")
    for (kind, coating), count in sorted(counts.items()):
        table.add_row(kind, coating, str(count))
    console.print(table)

    if verbose:
        for shape in shapes:
            order = shape.coating_order if shape.coating_order is not None else "-"
            status = "skip" if shape.skip_coating else (
                shape.coating_type.value if shape.coating_type else "none"
            )
            console.print(f"  {shape.display_name} {SYM_DOT} {shape.kind.value} {SYM_DOT} {status} {SYM_DOT} order {order}")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    lines: int,
    nozzle_cycles: int,
    shapes: int,
    detours: int = 0,
    z_lifts: int = 0,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total generation time in seconds
        lines: Number of G-code body lines
        nozzle_cycles: Number of nozzle on/off pairs
        shapes: Number of shapes coated
        detours: Travel moves routed around a mask
        z_lifts: Travel moves lifted over masks
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    console.print(
        f"  {shapes} shapes {SYM_DOT} {lines:,} lines {SYM_DOT} {nozzle_cycles:,} nozzle cycles"
    )
    if detours or z_lifts:
        console.print(f"  {detours} detours {SYM_DOT} {z_lifts} z-lifts")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print("  No output file created")
