"""Harp firmware images stored in Intel HEX format."""

import logging
import string
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Self

from .exceptions import FirmwareFormatError, UnsupportedRecordError
from .firmware_metadata import FirmwareMetadata

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 512

_START_CODE = ":"
_ERASED_BYTE = b"\xff"
_HEX_DIGITS = frozenset(string.hexdigits)


class RecordType(IntEnum):
    """Intel HEX record types."""

    DATA = 0
    END_OF_FILE = 1
    EXTENDED_SEGMENT_ADDRESS = 2
    START_SEGMENT_ADDRESS = 3
    EXTENDED_LINEAR_ADDRESS = 4
    START_LINEAR_ADDRESS = 5


@dataclass(frozen=True)
class DeviceFirmware:
    """Firmware image which can be uploaded into a Harp device.

    Attributes:
        metadata: Firmware version and supported devices, usually taken from
            the firmware file name.
        data: Binary image, padded with 0xFF to a whole number of pages.
        page_size: Size of the memory blocks used to upload the image.
    """

    metadata: FirmwareMetadata
    data: bytes
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self: Self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"Page size must be positive, got {self.page_size}")

    @property
    def page_count(self: Self) -> int:
        """Number of pages in the image."""
        return -(-len(self.data) // self.page_size)

    def pages(self: Self) -> Iterator[bytes]:
        """Iterate over the image one page at a time.

        Yields:
            Consecutive page_size chunks of the image.
        """
        for offset in range(0, len(self.data), self.page_size):
            yield self.data[offset : offset + self.page_size]

    @classmethod
    def from_file(
        cls, path: str | Path, page_size: int = DEFAULT_PAGE_SIZE
    ) -> Self:
        """Load firmware from an Intel HEX file.

        The metadata is parsed from the file name without its extension, e.g.
        ``Behavior-fw2.5.2-harp1.9.0-hw1.2-ass0.hex``.

        Args:
            path: Path to the HEX file.
            page_size: Size of the memory blocks used to upload the image.

        Returns:
            Firmware image with its metadata.

        Raises:
            InvalidMetadataError: If the file name is not valid metadata.
            FirmwareFormatError: If the file content is not valid Intel HEX.
            FileNotFoundError: If the file does not exist.
        """
        path = Path(path)
        metadata = FirmwareMetadata.parse(path.stem)
        with path.open("rb") as stream:
            firmware = cls.from_stream(metadata, _decode_lines(stream), page_size)

        logger.debug(
            "Loaded %s: %d bytes in %d pages",
            path.name,
            len(firmware.data),
            firmware.page_count,
        )
        return firmware

    @classmethod
    def from_stream(
        cls,
        metadata: str | FirmwareMetadata,
        stream: Iterable[str],
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Self:
        """Decode firmware from lines of Intel HEX text.

        Args:
            metadata: Firmware metadata, or its text form.
            stream: Text stream or any iterable of HEX lines.
            page_size: Size of the memory blocks used to upload the image.

        Returns:
            Firmware image with its metadata.

        Raises:
            ValueError: If page_size is not positive.
            InvalidMetadataError: If metadata text is invalid.
            FirmwareFormatError: If the content is not valid Intel HEX.
        """
        if page_size <= 0:
            raise ValueError(f"Page size must be positive, got {page_size}")
        if isinstance(metadata, str):
            metadata = FirmwareMetadata.parse(metadata)

        image = bytearray()
        _expand(image, page_size, page_size)
        base_address = 0
        for line_number, raw_line in enumerate(stream):
            line = raw_line.strip()
            if not line:
                continue
            base_address = _decode_record(
                line, line_number, image, base_address, page_size
            )

        return cls(metadata=metadata, data=bytes(image), page_size=page_size)


def _decode_record(
    line: str, line_number: int, image: bytearray, base_address: int, page_size: int
) -> int:
    """Apply a single HEX record to the image and return the new base address."""
    if line[0] != _START_CODE:
        raise FirmwareFormatError(
            "Invalid record start code found in hex stream.", line_number
        )

    reader = _RecordReader(line, line_number)
    count = reader.read(1)
    address = reader.read(2)
    try:
        record_type = RecordType(reader.read(1))
    except ValueError as e:
        raise FirmwareFormatError(
            "Invalid record type found in hex stream.", line_number
        ) from e

    match record_type:
        case RecordType.DATA:
            start = base_address + address
            _expand(image, start + count, page_size)
            for offset in range(count):
                image[start + offset] = reader.read(1)
        case RecordType.END_OF_FILE:
            pass
        case RecordType.EXTENDED_SEGMENT_ADDRESS:
            if count != 2:  # noqa: PLR2004
                raise FirmwareFormatError(
                    "Invalid extended segment address payload found in hex stream.",
                    line_number,
                )
            base_address = reader.read(2) * 16
        case RecordType.EXTENDED_LINEAR_ADDRESS:
            if count != 2:  # noqa: PLR2004
                raise FirmwareFormatError(
                    "Invalid extended linear address payload found in hex stream.",
                    line_number,
                )
            base_address = reader.read(2) << 16
        case RecordType.START_SEGMENT_ADDRESS | RecordType.START_LINEAR_ADDRESS:
            raise UnsupportedRecordError(
                "Unsupported record type found in hex stream.", line_number
            )

    reader.read(1)
    if reader.checksum & 0xFF != 0:
        raise FirmwareFormatError(
            "Invalid data checksum found in hex stream.", line_number
        )
    return base_address


class _RecordReader:
    """Reads big-endian hex fields from a record, summing bytes for the checksum."""

    def __init__(self: Self, line: str, line_number: int) -> None:
        self._line = line
        self._line_number = line_number
        self._position = 1
        self.checksum = 0

    def read(self: Self, size: int) -> int:
        end = self._position + 2 * size
        digits = self._line[self._position : end]
        if len(digits) != 2 * size or not set(digits) <= _HEX_DIGITS:
            raise FirmwareFormatError(
                "Invalid hex code specification found in hex stream.",
                self._line_number,
            )

        raw = bytes.fromhex(digits)
        self._position = end
        self.checksum += sum(raw)
        return int.from_bytes(raw, "big")


def _decode_lines(stream: Iterable[bytes]) -> Iterator[str]:
    for line_number, raw_line in enumerate(stream):
        try:
            yield raw_line.decode("ascii")
        except UnicodeDecodeError as e:
            raise FirmwareFormatError(
                "Invalid character found in hex stream.", line_number
            ) from e


def _expand(image: bytearray, size: int, page_size: int) -> None:
    if size <= len(image):
        return
    pages = -(-size // page_size)
    image.extend(_ERASED_BYTE * (pages * page_size - len(image)))
