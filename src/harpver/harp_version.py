"""Models the versions reported by Harp devices and firmware."""

import re
from dataclasses import dataclass
from typing import Any, Self

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from .exceptions import InvalidVersionError

FLOATING_WILDCARD = "x"

_VERSION_PATTERN = re.compile(
    r"(?P<major>[0-9]+|x)(?:\.(?P<minor>[0-9]+|x)(?:\.(?P<patch>[0-9]+|x))?)?",
    re.IGNORECASE,
)


@dataclass(frozen=True, eq=False)
class HarpVersion:
    """Harp version with optional floating components.

    A component left as ``None`` is floating: it matches any value of that
    component in ``satisfies`` and sorts below any concrete value. Floating
    components may only appear at the end, so ``HarpVersion(1, None, 2)`` is
    rejected. ``HarpVersion()`` matches every version and is not the same as
    having no version at all (``None``), which sorts below it.

    Attributes:
        major: Major version number, or None to match all versions.
        minor: Minor version number, or None to match all minor versions.
        patch: Patch version number, or None to match all patch versions.
    """

    major: int | None = None
    minor: int | None = None
    patch: int | None = None

    def __post_init__(self: Self) -> None:
        """Validate the components.

        Raises:
            InvalidVersionError: If a component is not a non-negative integer,
                or a component is specified after a floating one.
        """
        for name in ("major", "minor", "patch"):
            _check_component(name, getattr(self, name))

        if self.minor is not None and self.major is None:
            raise InvalidVersionError(
                "Minor version cannot be specified if major version is floating"
            )
        if self.patch is not None and self.minor is None:
            raise InvalidVersionError(
                "Patch version cannot be specified if minor version is floating"
            )

    @property
    def components(self: Self) -> tuple[int | None, int | None, int | None]:
        """Return the ``(major, minor, patch)`` components."""
        return (self.major, self.minor, self.patch)

    def satisfies(self: Self, other: Self | None) -> bool:
        """Check whether two versions are compatible.

        Every component specified in both versions must be equal. Floating
        components match anything. The relation is symmetric but not
        transitive: ``2.1`` and ``2.2`` both satisfy ``2.x`` without
        satisfying each other.

        Args:
            other: Version to check against.

        Returns:
            True if the versions are compatible, False otherwise or if
            ``other`` is None.
        """
        if other is None:
            return False
        return all(
            a is None or b is None or a == b
            for a, b in zip(self.components, other.components, strict=True)
        )

    @classmethod
    def parse(cls, version_str: str) -> Self:
        """Parse a Harp version string.

        Args:
            version_str: Version string in format "major[.minor[.patch]]". The
                last component may be the floating wildcard "x".

        Returns:
            Parsed HarpVersion instance.

        Raises:
            TypeError: If version_str is not a string.
            InvalidVersionError: If version string format is invalid.
        """
        if not isinstance(version_str, str):
            raise TypeError(f"Expected a version string, got {version_str!r}")

        match = _VERSION_PATTERN.fullmatch(version_str)
        if match is None:
            raise InvalidVersionError(f"Invalid Harp version: {version_str!r}")

        tokens = [t for t in match.group("major", "minor", "patch") if t is not None]
        if any(_is_wildcard(t) for t in tokens[:-1]):
            raise InvalidVersionError(
                f"Invalid Harp version: {version_str!r} "
                f"('{FLOATING_WILDCARD}' is only allowed as the last component)"
            )

        values = [None if _is_wildcard(t) else int(t) for t in tokens]
        return cls(*values)

    @classmethod
    def try_parse(cls, version_str: str) -> Self | None:
        """Parse a Harp version string, returning None if it is invalid.

        Args:
            version_str: Version string in format "major[.minor[.patch]]".

        Returns:
            Parsed HarpVersion instance, or None if the format is invalid.
        """
        try:
            return cls.parse(version_str)
        except InvalidVersionError:
            return None

    def __eq__(self: Self, other: object) -> bool:
        if other is None or isinstance(other, HarpVersion):
            return equals(self, other)
        return NotImplemented

    def __ne__(self: Self, other: object) -> bool:
        if other is None or isinstance(other, HarpVersion):
            return not equals(self, other)
        return NotImplemented

    def __lt__(self: Self, other: object) -> bool:
        if other is None or isinstance(other, HarpVersion):
            return compare(self, other) < 0
        return NotImplemented

    def __le__(self: Self, other: object) -> bool:
        if other is None or isinstance(other, HarpVersion):
            return compare(self, other) <= 0
        return NotImplemented

    def __gt__(self: Self, other: object) -> bool:
        if other is None or isinstance(other, HarpVersion):
            return compare(self, other) > 0
        return NotImplemented

    def __ge__(self: Self, other: object) -> bool:
        if other is None or isinstance(other, HarpVersion):
            return compare(self, other) >= 0
        return NotImplemented

    def __hash__(self: Self) -> int:
        return hash(self.components)

    def __str__(self: Self) -> str:
        """Return string representation of version.

        Floating components are omitted, so ``HarpVersion(1, 0)`` renders as
        "1.0". A version with every component floating renders as "x".

        Returns:
            Version string in format "major[.minor[.patch]]".
        """
        parts: list[str] = []
        for component in self.components:
            if component is None:
                break
            parts.append(str(component))
        return ".".join(parts) or FLOATING_WILDCARD

    def __repr__(self: Self) -> str:
        """Return detailed string representation.

        Returns:
            Detailed version representation.
        """
        return f"HarpVersion({self.major}, {self.minor}, {self.patch})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        from_str = core_schema.no_info_after_validator_function(
            cls.parse, core_schema.str_schema()
        )
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(cls), from_str]
            ),
            serialization=core_schema.to_string_ser_schema(when_used="always"),
        )


def equals(a: HarpVersion | None, b: HarpVersion | None) -> bool:
    """Check two possibly missing versions for equality.

    Args:
        a: First version, or None.
        b: Second version, or None.

    Returns:
        True if both are None or all components are pairwise equal.
    """
    if a is None or b is None:
        return a is None and b is None
    return a.components == b.components


def compare(a: HarpVersion | None, b: HarpVersion | None) -> int:
    """Compare two possibly missing versions.

    Components are compared from major to patch. A floating component sorts
    below any concrete value, and None sorts below every version.

    Args:
        a: First version, or None.
        b: Second version, or None.

    Returns:
        A negative number if a < b, zero if a == b, positive if a > b.
    """
    if a is None or b is None:
        return (a is not None) - (b is not None)

    for x, y in zip(a.components, b.components, strict=True):
        result = _compare_component(x, y)
        if result != 0:
            return result
    return 0


def _compare_component(a: int | None, b: int | None) -> int:
    if a == b:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    return -1 if a < b else 1


def _check_component(name: str, value: object) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidVersionError(
            f"{name.capitalize()} version must be an integer or None, got {value!r}"
        )
    if value < 0:
        raise InvalidVersionError(
            f"{name.capitalize()} version must be non-negative, got {value}"
        )


def _is_wildcard(token: str) -> bool:
    return token.lower() == FLOATING_WILDCARD
