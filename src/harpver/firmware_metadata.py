"""Firmware metadata encoded in Harp firmware file names."""

import re
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import InvalidMetadataError, InvalidVersionError
from .harp_version import FLOATING_WILDCARD, HarpVersion

_METADATA_PATTERN = re.compile(
    r"(?P<device>\w+)"
    r"-fw(?P<firmware>[^-]+)"
    r"-harp(?P<protocol>[^-]+)"
    r"-hw(?P<hardware>[^-]+)"
    r"-ass(?P<assembly>[0-9]+|[xX])"
    r"(?:-preview(?P<prerelease>[0-9]+))?"
)


class FirmwareMetadata(BaseModel):
    """Firmware version and the devices on which the firmware can be installed.

    The text form follows the Harp firmware naming convention::

        {device}-fw{firmware}-harp{protocol}-hw{hardware}-ass{assembly}[-preview{n}]

    for example ``Behavior-fw2.5.2-harp1.9.0-hw1.2-ass0``. An unspecified
    assembly version is written as "x".

    Attributes:
        device_name: Name of the device the firmware targets.
        firmware_version: Version of the firmware itself.
        protocol_version: Version of the Harp core protocol implemented.
        hardware_version: Hardware version the firmware supports.
        assembly_version: Board assembly number, or None for any assembly.
        prerelease_version: Preview release number, or None for a release.
    """

    model_config = ConfigDict(frozen=True)

    device_name: str = Field(pattern=r"^\w+$")
    firmware_version: HarpVersion
    protocol_version: HarpVersion
    hardware_version: HarpVersion
    assembly_version: int | None = Field(default=None, ge=0)
    prerelease_version: int | None = Field(default=None, ge=0)

    @property
    def is_prerelease(self: Self) -> bool:
        """Whether this is a preview release."""
        return self.prerelease_version is not None

    def supports(
        self: Self,
        device_name: str,
        hardware_version: HarpVersion,
        assembly_version: int = 0,
    ) -> bool:
        """Check whether the firmware can be installed on a device.

        Args:
            device_name: Name of the target device.
            hardware_version: Hardware version reported by the device.
            assembly_version: Board assembly number reported by the device.

        Returns:
            True if the device name matches, the hardware version satisfies the
            supported hardware version, and the assembly version matches when
            one is specified.
        """
        return (
            self.device_name == device_name
            and self.hardware_version.satisfies(hardware_version)
            and (
                self.assembly_version is None
                or self.assembly_version == assembly_version
            )
        )

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse firmware metadata from its text form.

        Args:
            text: Metadata text, usually a firmware file name without extension.

        Returns:
            Parsed FirmwareMetadata instance.

        Raises:
            TypeError: If text is not a string.
            InvalidMetadataError: If the text does not follow the naming
                convention or contains an invalid version.
        """
        if not isinstance(text, str):
            raise TypeError(f"Expected a metadata string, got {text!r}")

        match = _METADATA_PATTERN.fullmatch(text)
        if match is None:
            raise InvalidMetadataError(f"Invalid Harp firmware metadata: {text!r}")

        try:
            firmware = HarpVersion.parse(match["firmware"])
            protocol = HarpVersion.parse(match["protocol"])
            hardware = HarpVersion.parse(match["hardware"])
        except InvalidVersionError as e:
            raise InvalidMetadataError(
                f"Invalid Harp firmware metadata: {text!r} ({e})"
            ) from e

        assembly = match["assembly"]
        prerelease = match["prerelease"]
        floating_assembly = assembly.lower() == FLOATING_WILDCARD
        return cls(
            device_name=match["device"],
            firmware_version=firmware,
            protocol_version=protocol,
            hardware_version=hardware,
            assembly_version=None if floating_assembly else int(assembly),
            prerelease_version=None if prerelease is None else int(prerelease),
        )

    @classmethod
    def try_parse(cls, text: str) -> Self | None:
        """Parse firmware metadata, returning None if the text is invalid.

        Args:
            text: Metadata text.

        Returns:
            Parsed FirmwareMetadata instance, or None.
        """
        try:
            return cls.parse(text)
        except InvalidMetadataError:
            return None

    def __str__(self: Self) -> str:
        """Return the metadata in the firmware naming convention.

        Returns:
            Metadata text that ``parse`` maps back to an equal instance.
        """
        assembly = (
            FLOATING_WILDCARD
            if self.assembly_version is None
            else str(self.assembly_version)
        )
        prerelease = (
            f"-preview{self.prerelease_version}" if self.is_prerelease else ""
        )
        return (
            f"{self.device_name}"
            f"-fw{self.firmware_version}"
            f"-harp{self.protocol_version}"
            f"-hw{self.hardware_version}"
            f"-ass{assembly}{prerelease}"
        )
