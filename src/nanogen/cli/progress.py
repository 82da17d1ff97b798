"""
Rich progress displays for CLI operations.

All output goes to stderr to preserve stdout for machine-readable output.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

# Console for stderr output (preserves stdout for machine output)
console = Console(stderr=True)


@contextmanager
def generation_progress(
    model: str | None = None,
    is_edit: bool = False,
    aspect_ratio: str | None = None,
) -> Iterator[None]:
    """
    Display a spinner while the image request is in flight.

    Args:
        model: The image model being used
        is_edit: Whether a source image is being edited
        aspect_ratio: The requested aspect ratio
    """
    progress = Progress(
        SpinnerColumn(spinner_name="dots"),
        TextColumn("[green]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )

    desc_parts = ["Editing image" if is_edit else "Generating image"]
    if model:
        model_display = model if len(model) <= 40 else f"{model[:37]}..."
        desc_parts.append(f"[dim]({model_display})[/dim]")
    if aspect_ratio:
        desc_parts.append(f"[dim cyan]{aspect_ratio}[/dim cyan]")

    with progress:
        task = progress.add_task(" ".join(desc_parts), total=None)
        yield
        progress.update(task, completed=True)


def print_success_result(
    output_path: Path,
    generation_time: float,
    model_used: str,
    prompt_used: str,
    is_edit: bool,
    aspect_ratio: str,
) -> None:
    """Print a formatted success panel with generation details."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", justify="right", vertical="top")
    table.add_column(style="white")

    table.add_row("Saved to", f"[bold green]{output_path}[/bold green]")
    table.add_row("Model", model_used)
    table.add_row("Time", f"{generation_time:.1f}s")
    table.add_row("Mode", "Edit" if is_edit else "Generate")
    table.add_row("Aspect ratio", aspect_ratio)
    table.add_row("Prompt", f"[dim]{prompt_used}[/dim]")

    panel = Panel(
        table,
        title="[bold green]✓ Image Generated[/bold green]",
        border_style="green",
        padding=(1, 2),
    )

    console.print()
    console.print(panel)


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]✗[/red] {message}")
