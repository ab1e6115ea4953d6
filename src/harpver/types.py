"""Type aliases needed in the package."""

from pathlib import Path
from typing import TypeAlias

from .harp_version import HarpVersion

DeviceName: TypeAlias = str
VersionLike: TypeAlias = str | HarpVersion
PathLike: TypeAlias = str | Path
