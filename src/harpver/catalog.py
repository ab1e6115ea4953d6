"""Firmware catalog."""

import logging
from collections import defaultdict
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Self

from .exceptions import FirmwareNotFoundError, InvalidMetadataError
from .firmware_metadata import FirmwareMetadata
from .harp_version import HarpVersion
from .types import DeviceName, PathLike, VersionLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    """Firmware registered in a catalog.

    Attributes:
        metadata: Metadata describing the firmware.
        source: File the firmware was found in, if any.
    """

    metadata: FirmwareMetadata
    source: Path | None = None

    def sort_key(self: Self) -> tuple[HarpVersion, bool, int]:
        """Key ordering entries by firmware version, previews before releases."""
        metadata = self.metadata
        return (
            metadata.firmware_version,
            not metadata.is_prerelease,
            metadata.prerelease_version or 0,
        )


class FirmwareCatalog:
    """Catalog of firmware available for Harp devices.

    Entries are grouped by device name and keyed by their metadata, so
    registering the same metadata twice replaces the earlier entry.

    Attributes:
        _entries: Dictionary mapping device names to metadata-entry mappings.
    """

    def __init__(self: Self) -> None:
        """Initialize an empty catalog."""
        self._entries: dict[DeviceName, dict[FirmwareMetadata, CatalogEntry]] = (
            defaultdict(dict)
        )

    def register(
        self: Self,
        metadata: str | FirmwareMetadata,
        source: PathLike | None = None,
    ) -> CatalogEntry:
        """Register firmware in the catalog.

        Args:
            metadata: Firmware metadata or its text form.
            source: Optional file containing the firmware image.

        Returns:
            The registered entry.

        Raises:
            InvalidMetadataError: If metadata text is invalid.
        """
        meta = (
            FirmwareMetadata.parse(metadata) if isinstance(metadata, str) else metadata
        )
        entry = CatalogEntry(meta, Path(source) if source is not None else None)
        self._entries[meta.device_name][meta] = entry
        return entry

    def get_devices(self: Self) -> list[DeviceName]:
        """Get the names of all devices with registered firmware.

        Returns:
            Sorted list of device names.
        """
        return sorted(self._entries)

    def get_entries(self: Self, device_name: DeviceName) -> list[CatalogEntry]:
        """Get all firmware registered for a device.

        Args:
            device_name: Name of the device.

        Returns:
            Entries sorted from oldest to newest firmware.

        Raises:
            FirmwareNotFoundError: If no firmware is registered for the device.
        """
        if device_name not in self._entries:
            raise FirmwareNotFoundError(f"No firmware found for device {device_name}")

        return sorted(self._entries[device_name].values(), key=CatalogEntry.sort_key)

    def get_versions(self: Self, device_name: DeviceName) -> list[HarpVersion]:
        """Get the firmware versions available for a device.

        Args:
            device_name: Name of the device.

        Returns:
            Sorted list of distinct firmware versions.

        Raises:
            FirmwareNotFoundError: If no firmware is registered for the device.
        """
        versions = {e.metadata.firmware_version for e in self.get_entries(device_name)}
        return sorted(versions)

    def get_latest(
        self: Self, device_name: DeviceName, include_prerelease: bool = False
    ) -> CatalogEntry:
        """Get the newest firmware registered for a device.

        Args:
            device_name: Name of the device.
            include_prerelease: Whether preview releases are considered.

        Returns:
            The entry with the highest firmware version.

        Raises:
            FirmwareNotFoundError: If no matching firmware is registered.
        """
        entries = [
            e
            for e in self.get_entries(device_name)
            if include_prerelease or not e.metadata.is_prerelease
        ]
        if not entries:
            raise FirmwareNotFoundError(
                f"No released firmware found for device {device_name}"
            )
        return entries[-1]

    def find_compatible(
        self: Self,
        device_name: DeviceName,
        hardware_version: VersionLike,
        assembly_version: int = 0,
        include_prerelease: bool = False,
    ) -> list[CatalogEntry]:
        """Find the firmware that can be installed on a device.

        Args:
            device_name: Name of the device.
            hardware_version: Hardware version reported by the device.
            assembly_version: Board assembly number reported by the device.
            include_prerelease: Whether preview releases are considered.

        Returns:
            Compatible entries sorted from oldest to newest firmware. Empty if
            the device is unknown or nothing is compatible.
        """
        hw = (
            HarpVersion.parse(hardware_version)
            if isinstance(hardware_version, str)
            else hardware_version
        )
        entries = self._entries.get(device_name, {}).values()
        compatible = [
            e
            for e in entries
            if e.metadata.supports(device_name, hw, assembly_version)
            and (include_prerelease or not e.metadata.is_prerelease)
        ]
        return sorted(compatible, key=CatalogEntry.sort_key)

    def best_match(
        self: Self,
        device_name: DeviceName,
        hardware_version: VersionLike,
        assembly_version: int = 0,
        include_prerelease: bool = False,
    ) -> CatalogEntry:
        """Get the newest firmware that can be installed on a device.

        Args:
            device_name: Name of the device.
            hardware_version: Hardware version reported by the device.
            assembly_version: Board assembly number reported by the device.
            include_prerelease: Whether preview releases are considered.

        Returns:
            The newest compatible entry.

        Raises:
            FirmwareNotFoundError: If no compatible firmware is registered.
        """
        compatible = self.find_compatible(
            device_name, hardware_version, assembly_version, include_prerelease
        )
        if not compatible:
            raise FirmwareNotFoundError(
                f"No firmware for {device_name} supports hardware "
                f"v{hardware_version} assembly {assembly_version}"
            )
        return compatible[-1]

    @classmethod
    def from_directory(cls, path: PathLike, pattern: str = "*.hex") -> Self:
        """Build a catalog from the firmware files in a directory.

        Files whose names are not valid firmware metadata are skipped.

        Args:
            path: Directory to scan.
            pattern: Glob pattern selecting firmware files.

        Returns:
            Catalog containing every recognized file.

        Raises:
            NotADirectoryError: If path is not a directory.
        """
        directory = Path(path)
        if not directory.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        catalog = cls()
        for file in sorted(directory.glob(pattern)):
            if not file.is_file():
                continue
            try:
                catalog.register(file.stem, source=file)
            except InvalidMetadataError:
                logger.debug("Skipping %s: not a firmware file name", file.name)
        logger.info("Found %d firmware files in %s", len(catalog), directory)
        return catalog

    def __len__(self: Self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def __iter__(self: Self) -> Iterator[CatalogEntry]:
        for device_name in self.get_devices():
            yield from self.get_entries(device_name)
