"""treewright configuration and settings.

Tunables for the deletion engine, the retry wrapper and the permission
probe. Configuration is stored in ~/.config/treewright/config.toml; every
setting has a default, so the file is optional.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from treewright.core.paths import get_config_path

logger = logging.getLogger(__name__)

DEFAULT_RETRY_BACKOFF_SECONDS = 1.0
DEFAULT_PERMISSIONS_CHECK_FAILSAFE = 100


class TreewrightConfig(BaseModel):
    """Configuration for filesystem lifecycle operations.

    Attributes:
        retry_backoff_seconds: Unit of the linear retry backoff. Attempt n
            waits ``n * retry_backoff_seconds`` before attempt n + 1.
        max_workers: Worker threads for parallel deletion (None = CPU count).
        continue_on_error: Default for swallowing per-entry deletion failures.
        permissions_check_failsafe: Maximum ancestors probed by the
            permission check before giving up.
    """

    model_config = ConfigDict(extra="forbid")

    retry_backoff_seconds: Annotated[
        float,
        Field(ge=0, le=60, description="Linear retry backoff unit in seconds (0-60)"),
    ] = DEFAULT_RETRY_BACKOFF_SECONDS
    max_workers: Annotated[
        int | None,
        Field(ge=1, description="Deletion worker threads (None = CPU count)"),
    ] = None
    continue_on_error: Annotated[
        bool,
        Field(description="Swallow per-entry failures during directory deletion"),
    ] = False
    permissions_check_failsafe: Annotated[
        int,
        Field(ge=1, le=10000, description="Ancestor directories probed (1-10000)"),
    ] = DEFAULT_PERMISSIONS_CHECK_FAILSAFE


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> TreewrightConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated TreewrightConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return TreewrightConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> TreewrightConfig:
    """Load configuration, falling back to defaults when no file exists.

    Parse and validation errors still propagate.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using defaults")
        return get_default_config()


def save_config(config: TreewrightConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The TreewrightConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: TreewrightConfig) -> dict[str, object]:
    """Convert TreewrightConfig to a dictionary for TOML serialization.

    TOML has no null, so unset optional values are omitted.
    """
    return config.model_dump(exclude_none=True)


def get_default_config() -> TreewrightConfig:
    """Create a default TreewrightConfig."""
    return TreewrightConfig()
