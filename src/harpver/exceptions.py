"""Exceptions raised by harpver."""

from typing import Self


class HarpError(Exception):
    """Base exception for all harpver errors."""


class InvalidVersionError(HarpError, ValueError):
    """Raised when a Harp version is malformed or violates floating rules."""


class InvalidMetadataError(HarpError, ValueError):
    """Raised when firmware metadata text cannot be parsed."""


class FirmwareFormatError(HarpError, ValueError):
    """Raised when a firmware image is not valid Intel HEX.

    Attributes:
        line: Zero-based line number where decoding failed, if known.
    """

    def __init__(self: Self, message: str, line: int | None = None) -> None:
        """Initialize the error.

        Args:
            message: Description of the problem.
            line: Zero-based line number where decoding failed.
        """
        self.line = line
        super().__init__(f"{line}: {message}" if line is not None else message)


class UnsupportedRecordError(FirmwareFormatError):
    """Raised for Intel HEX records that cannot be uploaded to a device."""


class FirmwareNotFoundError(HarpError, LookupError):
    """Raised when no firmware matches a catalog query."""


class ConfigError(HarpError):
    """Raised when configuration cannot be loaded."""
