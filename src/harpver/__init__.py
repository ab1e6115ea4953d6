"""harpver - Harp device versions and firmware metadata.

A package for comparing and matching the hardware, firmware and protocol
versions reported by Harp devices, and for reading Harp firmware images.
"""

from ._version import __version__
from .catalog import CatalogEntry, FirmwareCatalog
from .device_firmware import DeviceFirmware
from .exceptions import (
    ConfigError,
    FirmwareFormatError,
    FirmwareNotFoundError,
    HarpError,
    InvalidMetadataError,
    InvalidVersionError,
    UnsupportedRecordError,
)
from .firmware_metadata import FirmwareMetadata
from .harp_version import HarpVersion, compare, equals
from .types import DeviceName, PathLike, VersionLike

__all__ = [
    "CatalogEntry",
    "ConfigError",
    "DeviceFirmware",
    "DeviceName",
    "FirmwareCatalog",
    "FirmwareFormatError",
    "FirmwareMetadata",
    "FirmwareNotFoundError",
    "HarpError",
    "HarpVersion",
    "InvalidMetadataError",
    "InvalidVersionError",
    "PathLike",
    "UnsupportedRecordError",
    "VersionLike",
    "__version__",
    "compare",
    "equals",
]
