"""Shared fixtures for harpver tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from harpver import FirmwareCatalog, FirmwareMetadata, HarpVersion

FIRMWARE_NAMES = [
    "Behavior-fw2.4.0-harp1.9.0-hw1.2-ass0",
    "Behavior-fw2.5.2-harp1.9.0-hw1.2-ass0",
    "Behavior-fw2.5.1-harp1.9.0-hw1.x-assx",
    "Behavior-fw2.6.0-harp1.9.0-hw1.2-ass0-preview1",
    "Behavior-fw3.0.0-harp1.12.0-hw2.0-ass0",
    "LoadCells-fw1.0.0-harp1.8.0-hw1.0-ass0",
    "Olfactometer-fw1.0.0-harp1.8.0-hw1.0-ass0-preview2",
]


def hex_record(record_type: int, address: int = 0, payload: bytes = b"") -> str:
    """Build an Intel HEX record with a valid checksum."""
    body = bytes([len(payload), (address >> 8) & 0xFF, address & 0xFF, record_type])
    body += payload
    checksum = -sum(body) & 0xFF
    return ":" + (body + bytes([checksum])).hex().upper()


HEX_EOF = ":00000001FF"


@pytest.fixture
def record() -> Callable[..., str]:
    """Return the Intel HEX record builder."""
    return hex_record


@pytest.fixture
def behavior_metadata() -> FirmwareMetadata:
    """Metadata for a released Behavior firmware."""
    return FirmwareMetadata(
        device_name="Behavior",
        firmware_version=HarpVersion(2, 5, 2),
        protocol_version=HarpVersion(1, 9, 0),
        hardware_version=HarpVersion(1, 2),
        assembly_version=0,
    )


@pytest.fixture
def write_firmware(tmp_path: Path) -> Callable[..., Path]:
    """Return a function writing a HEX firmware file into tmp_path."""

    def write(name: str, lines: list[str] | None = None) -> Path:
        if lines is None:
            lines = [hex_record(0, 0, bytes(range(16))), HEX_EOF]
        path = tmp_path / f"{name}.hex"
        path.write_text("\n".join(lines) + "\n", encoding="ascii")
        return path

    return write


@pytest.fixture
def firmware_dir(tmp_path: Path, write_firmware: Callable[..., Path]) -> Path:
    """Directory with firmware files for several devices."""
    for name in FIRMWARE_NAMES:
        write_firmware(name)
    (tmp_path / "README.hex").write_text(HEX_EOF + "\n")
    (tmp_path / "notes.txt").write_text("not firmware\n")
    return tmp_path


@pytest.fixture
def catalog() -> FirmwareCatalog:
    """Catalog populated with FIRMWARE_NAMES."""
    firmware_catalog = FirmwareCatalog()
    for name in FIRMWARE_NAMES:
        firmware_catalog.register(name)
    return firmware_catalog
