"""Configuration loading from harpver.toml or pyproject.toml."""

import logging
import tomllib
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .device_firmware import DEFAULT_PAGE_SIZE
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "harpver.toml"
PYPROJECT_FILE_NAME = "pyproject.toml"


class HarpverConfig(BaseModel):
    """Settings for the harpver command-line tools.

    Attributes:
        firmware_dir: Directory searched for firmware files.
        page_size: Size of the memory blocks used to upload firmware.
        source: Config file the settings were read from, if any.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    firmware_dir: Path | None = None
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, gt=0)
    source: Path | None = Field(default=None, exclude=True)

    def resolve_firmware_dir(self: Self) -> Path | None:
        """Resolve firmware_dir relative to the config file location.

        Returns:
            Absolute firmware directory, or None if not configured.
        """
        if self.firmware_dir is None:
            return None
        if self.firmware_dir.is_absolute() or self.source is None:
            return self.firmware_dir
        return self.source.parent / self.firmware_dir


def find_config_file(directory: Path | None = None) -> Path | None:
    """Find the config file for a directory.

    harpver.toml takes precedence over a pyproject.toml with a
    [tool.harpver] table.

    Args:
        directory: Directory to search. Defaults to the current directory.

    Returns:
        Path to the config file, or None if there is none.
    """
    directory = directory or Path.cwd()

    config_file = directory / CONFIG_FILE_NAME
    if config_file.is_file():
        return config_file

    pyproject = directory / PYPROJECT_FILE_NAME
    if pyproject.is_file() and "harpver" in _read_toml(pyproject).get("tool", {}):
        return pyproject

    return None


def load_config(config_path: Path | None = None) -> HarpverConfig:
    """Load settings from a config file.

    Args:
        config_path: Explicit config file. If not given, the current directory
            is searched with find_config_file.

    Returns:
        Loaded settings, or defaults if no config file is found.

    Raises:
        ConfigError: If the file cannot be read or contains invalid settings.
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            logger.debug("No config file found, using defaults")
            return HarpverConfig()
    elif not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    data = _read_toml(config_path)
    if config_path.name == PYPROJECT_FILE_NAME:
        settings = data.get("tool", {}).get("harpver", {})
    else:
        settings = data.get("harpver", {})

    try:
        config = HarpverConfig(**settings, source=config_path)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{e}") from e
    except TypeError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e

    logger.debug("Loaded config from %s", config_path)
    return config


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
