"""Tests FirmwareMetadata."""

import pytest
from pydantic import ValidationError

from harpver import FirmwareMetadata, HarpVersion, InvalidMetadataError


def test_parse_and_str_are_reversible(behavior_metadata: FirmwareMetadata) -> None:
    """Test metadata round trips through its text form."""
    text = str(behavior_metadata)
    assert text == "Behavior-fw2.5.2-harp1.9.0-hw1.2-ass0"
    assert FirmwareMetadata.parse(text) == behavior_metadata


def test_parse_and_str_patch_floating_are_reversible() -> None:
    """Test floating versions and assembly round trip."""
    x = FirmwareMetadata(
        device_name="Behavior",
        firmware_version=HarpVersion(2, 5),
        protocol_version=HarpVersion(1, 6),
        hardware_version=HarpVersion(1, 2),
    )
    text = str(x)
    assert text == "Behavior-fw2.5-harp1.6-hw1.2-assx"
    assert FirmwareMetadata.parse(text) == x


def test_parse_and_str_any_hardware_are_reversible() -> None:
    """Test fully floating hardware versions round trip."""
    x = FirmwareMetadata(
        device_name="Timestamp_Generator",
        firmware_version=HarpVersion(1, 0, 0),
        protocol_version=HarpVersion(1),
        hardware_version=HarpVersion(),
        assembly_version=3,
        prerelease_version=4,
    )
    text = str(x)
    assert text == "Timestamp_Generator-fw1.0.0-harp1-hwx-ass3-preview4"
    assert FirmwareMetadata.parse(text) == x


def test_parse_fields() -> None:
    """Test each field is extracted from the text form."""
    meta = FirmwareMetadata.parse("Behavior-fw2.6.0-harp1.9.0-hw1.x-assx-preview1")
    assert meta.device_name == "Behavior"
    assert meta.firmware_version == HarpVersion(2, 6, 0)
    assert meta.protocol_version == HarpVersion(1, 9, 0)
    assert meta.hardware_version == HarpVersion(1)
    assert meta.assembly_version is None
    assert meta.prerelease_version == 1
    assert meta.is_prerelease


@pytest.mark.parametrize(
    "text",
    [
        "",
        "Behavior",
        "Behavior-fw2.5-harp1.6-hw1.2",
        "Behavior-fw2.5-harp1.6-ass0",
        "Behavior-fw2.xx-harp1.6-hw1.2-ass0",
        "Behavior-fw2.5-harp1.x.0-hw1.2-ass0",
        "Behavior-fw2.5-harp1.6-hw1;2-ass0",
        "Beha-vior-fw2.5-harp1.6-hw1.2-ass0",
        "-fw2.5-harp1.6-hw1.2-ass0",
        "Behavior-fw2.5-harp1.6-hw1.2-ass0-preview",
        "Behavior-fw2.5-harp1.6-hw1.2-ass0.hex",
        "Behavior-hw1.2-fw2.5-harp1.6-ass0",
    ],
)
def test_parse_invalid(text: str) -> None:
    """Test malformed metadata raises InvalidMetadataError."""
    with pytest.raises(InvalidMetadataError):
        FirmwareMetadata.parse(text)
    assert FirmwareMetadata.try_parse(text) is None


def test_parse_none_raises_type_error() -> None:
    """Test parsing None is a programming error."""
    with pytest.raises(TypeError):
        FirmwareMetadata.parse(None)  # type: ignore[arg-type]


def test_equality_uses_all_fields(behavior_metadata: FirmwareMetadata) -> None:
    """Test metadata differing in any field is not equal."""
    assert behavior_metadata == behavior_metadata.model_copy()
    for update in (
        {"device_name": "LoadCells"},
        {"firmware_version": HarpVersion(2, 5)},
        {"protocol_version": HarpVersion(1, 9, 1)},
        {"hardware_version": HarpVersion(1, 2, 0)},
        {"assembly_version": None},
        {"prerelease_version": 1},
    ):
        assert behavior_metadata != behavior_metadata.model_copy(update=update)


def test_hashable(behavior_metadata: FirmwareMetadata) -> None:
    """Test equal metadata hash equally."""
    other = FirmwareMetadata.parse(str(behavior_metadata))
    assert hash(other) == hash(behavior_metadata)
    assert len({other, behavior_metadata}) == 1


def test_versions_accept_text() -> None:
    """Test version fields are validated from text."""
    meta = FirmwareMetadata(
        device_name="Behavior",
        firmware_version="2.5.2",  # type: ignore[arg-type]
        protocol_version="1.9",  # type: ignore[arg-type]
        hardware_version="1.x",  # type: ignore[arg-type]
    )
    assert meta.firmware_version == HarpVersion(2, 5, 2)
    assert meta.hardware_version == HarpVersion(1)


@pytest.mark.parametrize(
    "update",
    [
        {"device_name": "Bad-Name"},
        {"device_name": ""},
        {"firmware_version": None},
        {"hardware_version": "1.x.0"},
        {"assembly_version": -1},
        {"prerelease_version": -1},
    ],
)
def test_invalid_construction(update: dict[str, object]) -> None:
    """Test invalid fields are rejected at construction."""
    fields: dict[str, object] = {
        "device_name": "Behavior",
        "firmware_version": HarpVersion(2, 5, 2),
        "protocol_version": HarpVersion(1, 9, 0),
        "hardware_version": HarpVersion(1, 2),
        "assembly_version": 0,
    }
    fields.update(update)
    with pytest.raises(ValidationError):
        FirmwareMetadata(**fields)  # type: ignore[arg-type]


def test_metadata_is_immutable(behavior_metadata: FirmwareMetadata) -> None:
    """Test metadata cannot be modified after construction."""
    with pytest.raises(ValidationError):
        behavior_metadata.device_name = "LoadCells"  # type: ignore[misc]


def test_json_round_trip(behavior_metadata: FirmwareMetadata) -> None:
    """Test metadata serializes versions as text."""
    data = behavior_metadata.model_dump()
    assert data["firmware_version"] == "2.5.2"
    assert data["hardware_version"] == "1.2"
    json_text = behavior_metadata.model_dump_json()
    assert FirmwareMetadata.model_validate_json(json_text) == behavior_metadata


# Supports tests
def test_supports_matching_device(behavior_metadata: FirmwareMetadata) -> None:
    """Test firmware supports a device with matching name and hardware."""
    assert behavior_metadata.supports("Behavior", HarpVersion(1, 2))
    assert behavior_metadata.supports("Behavior", HarpVersion(1, 2, 5))
    assert behavior_metadata.supports("Behavior", HarpVersion(1), 0)


def test_supports_rejects_mismatch(behavior_metadata: FirmwareMetadata) -> None:
    """Test device name, hardware and assembly must all match."""
    assert not behavior_metadata.supports("LoadCells", HarpVersion(1, 2))
    assert not behavior_metadata.supports("Behavior", HarpVersion(1, 3))
    assert not behavior_metadata.supports("Behavior", HarpVersion(2, 2))
    assert not behavior_metadata.supports("Behavior", HarpVersion(1, 2), 1)


def test_supports_any_assembly() -> None:
    """Test a floating assembly version matches every board assembly."""
    meta = FirmwareMetadata.parse("Behavior-fw2.5.1-harp1.9.0-hw1.x-assx")
    assert meta.supports("Behavior", HarpVersion(1, 7), 0)
    assert meta.supports("Behavior", HarpVersion(1, 7), 5)
    assert not meta.supports("Behavior", HarpVersion(2, 0), 5)
