"""Output and logging helpers for the CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..firmware_metadata import FirmwareMetadata
from ..harp_version import FLOATING_WILDCARD

console = Console()
err_console = Console(stderr=True)

_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def configure_logging(verbosity: int) -> None:
    """Route package logging through rich.

    Args:
        verbosity: Number of -v flags given; 1 shows info, 2 or more debug.
    """
    logging.basicConfig(
        level=_LOG_LEVELS.get(verbosity, logging.DEBUG),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_failure(message: str) -> None:
    """Print a failed check."""
    console.print(f"[red]✗[/red] {escape(message)}")


def format_assembly(assembly_version: int | None) -> str:
    """Format an assembly number, showing the wildcard when unspecified."""
    return FLOATING_WILDCARD if assembly_version is None else str(assembly_version)


def metadata_table(metadata: FirmwareMetadata, title: str | None = None) -> Table:
    """Build a two-column table describing firmware metadata.

    Args:
        metadata: Metadata to describe.
        title: Optional table title.

    Returns:
        Rich table ready to print.
    """
    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Device", metadata.device_name)
    table.add_row("Firmware", str(metadata.firmware_version))
    table.add_row("Protocol", str(metadata.protocol_version))
    table.add_row("Hardware", str(metadata.hardware_version))
    table.add_row("Assembly", format_assembly(metadata.assembly_version))
    if metadata.is_prerelease:
        table.add_row("Preview", str(metadata.prerelease_version))
    return table
