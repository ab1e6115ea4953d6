"""Command-line interface for harpver."""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from ..catalog import CatalogEntry, FirmwareCatalog
from ..config import load_config
from ..device_firmware import DeviceFirmware
from ..exceptions import ConfigError, HarpError
from ..firmware_metadata import FirmwareMetadata
from ..harp_version import HarpVersion, compare
from ._helpers import (
    configure_logging,
    console,
    format_assembly,
    metadata_table,
    print_error,
    print_failure,
    print_success,
)

app = typer.Typer(help="Harp firmware and hardware version tools")

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        ...,
        "--config",
        "-c",
        help="Path to config file (pyproject.toml or harpver.toml)",
    ),
]

AssemblyOption = Annotated[
    int,
    typer.Option(..., "--assembly", "-a", min=0, help="Board assembly number"),
]


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            ..., "--verbose", "-v", count=True, help="Show logs (-vv for debug)"
        ),
    ] = 0,
) -> None:
    """Harp firmware and hardware version tools."""
    configure_logging(verbose)


@app.command()
def parse(
    version: Annotated[str, typer.Argument(..., help="Version text, e.g. 1.2.x")],
) -> None:
    """Parse a version and show its components."""
    try:
        ver = HarpVersion.parse(version)
    except HarpError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    table = Table(title=f"Harp version {ver}")
    table.add_column("Component", style="cyan")
    table.add_column("Value", style="green")
    for name, value in zip(("major", "minor", "patch"), ver.components, strict=True):
        table.add_row(name, "floating" if value is None else str(value))

    console.print(table)
    console.print(f"[dim]Canonical form: {ver}[/dim]")


@app.command(name="compare")
def compare_versions(
    first: Annotated[str, typer.Argument(..., help="First version")],
    second: Annotated[str, typer.Argument(..., help="Second version")],
) -> None:
    """Compare two versions and check whether they are compatible."""
    try:
        a = HarpVersion.parse(first)
        b = HarpVersion.parse(second)
    except HarpError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    symbol = {-1: "<", 0: "==", 1: ">"}[compare(a, b)]
    console.print(f"{a} {symbol} {b}")
    if a.satisfies(b):
        print_success(f"{a} and {b} are compatible")
    else:
        print_failure(f"{a} and {b} are not compatible")


@app.command()
def metadata(
    text: Annotated[
        str,
        typer.Argument(
            ..., help="Metadata text, e.g. Behavior-fw2.5.2-harp1.9.0-hw1.2-ass0"
        ),
    ],
) -> None:
    """Parse firmware metadata and show its fields."""
    try:
        meta = FirmwareMetadata.parse(text)
    except HarpError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    console.print(metadata_table(meta, title="Firmware Metadata"))


@app.command()
def inspect(
    file: Annotated[Path, typer.Argument(..., help="Firmware file (Intel HEX)")],
    config: ConfigOption = None,
) -> None:
    """Show the metadata and size of a firmware file."""
    try:
        cfg = load_config(config)
        firmware = DeviceFirmware.from_file(file, cfg.page_size)
    except FileNotFoundError as e:
        print_error(f"File not found: {file}")
        raise typer.Exit(1) from e
    except HarpError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    console.print(metadata_table(firmware.metadata, title=file.name))
    console.print(
        f"\n[bold]Image:[/bold] {len(firmware.data)} bytes in "
        f"{firmware.page_count} pages of {firmware.page_size} bytes"
    )


@app.command()
def check(
    file: Annotated[Path, typer.Argument(..., help="Firmware file (Intel HEX)")],
    device: Annotated[
        str, typer.Option(..., "--device", "-d", help="Device name")
    ],
    hardware: Annotated[
        str, typer.Option(..., "--hardware", "-w", help="Device hardware version")
    ],
    assembly: AssemblyOption = 0,
    config: ConfigOption = None,
) -> None:
    """Check whether a firmware file can be installed on a device."""
    try:
        cfg = load_config(config)
        hw = HarpVersion.parse(hardware)
        firmware = DeviceFirmware.from_file(file, cfg.page_size)
    except FileNotFoundError as e:
        print_error(f"File not found: {file}")
        raise typer.Exit(1) from e
    except HarpError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    meta = firmware.metadata
    if meta.supports(device, hw, assembly):
        print_success(f"{meta} supports {device} hw{hw} assembly {assembly}")
        raise typer.Exit(0)

    print_failure(f"{meta} does not support {device} hw{hw} assembly {assembly}")
    console.print(
        f"[dim]Firmware targets {meta.device_name} hw{meta.hardware_version} "
        f"assembly {format_assembly(meta.assembly_version)}[/dim]"
    )
    raise typer.Exit(1)


@app.command()
def catalog(  # noqa: PLR0913
    directory: Annotated[
        Path | None,
        typer.Argument(
            ..., help="Directory with firmware files (default: firmware_dir)"
        ),
    ] = None,
    device: Annotated[
        str | None, typer.Option(..., "--device", "-d", help="Device name")
    ] = None,
    hardware: Annotated[
        str | None,
        typer.Option(..., "--hardware", "-w", help="Device hardware version"),
    ] = None,
    assembly: AssemblyOption = 0,
    prerelease: Annotated[
        bool,
        typer.Option(
            ..., "--prerelease/--no-prerelease", help="Include preview releases"
        ),
    ] = False,
    config: ConfigOption = None,
) -> None:
    """List firmware files, optionally only those compatible with a device."""
    if hardware is not None and device is None:
        print_error("--hardware requires --device")
        raise typer.Exit(1)

    try:
        cfg = load_config(config)
        firmware_dir = directory or cfg.resolve_firmware_dir()
        if firmware_dir is None:
            raise ConfigError(
                "No firmware directory given and no firmware_dir configured"
            )

        found = FirmwareCatalog.from_directory(firmware_dir)
        entries: list[CatalogEntry]
        if device is not None and hardware is not None:
            entries = found.find_compatible(device, hardware, assembly, prerelease)
        elif device is not None:
            entries = [
                e
                for e in found.get_entries(device)
                if prerelease or not e.metadata.is_prerelease
            ]
        else:
            entries = [e for e in found if prerelease or not e.metadata.is_prerelease]
    except NotADirectoryError as e:
        print_error(str(e))
        raise typer.Exit(1) from e
    except HarpError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    if not entries:
        console.print("[yellow]No firmware found[/yellow]")
        return

    table = Table(title=f"Firmware in {firmware_dir}")
    table.add_column("Device", style="cyan")
    table.add_column("Firmware", style="green")
    table.add_column("Protocol")
    table.add_column("Hardware")
    table.add_column("Assembly")
    table.add_column("File", style="dim")

    for entry in entries:
        meta = entry.metadata
        firmware = str(meta.firmware_version)
        if meta.is_prerelease:
            firmware += f" (preview {meta.prerelease_version})"
        table.add_row(
            meta.device_name,
            firmware,
            str(meta.protocol_version),
            str(meta.hardware_version),
            format_assembly(meta.assembly_version),
            entry.source.name if entry.source else "",
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(entries)} firmware files[/dim]")


if __name__ == "__main__":
    app()
