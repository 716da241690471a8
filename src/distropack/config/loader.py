"""
Configuration file loading and saving.

The CLI keeps a single `config.toml` under the user's configuration
directory. It is read with ``tomllib`` and written with ``toml``.
"""

import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any, Dict

import toml

from ..models.config import CliConfig
from ..validation import ConfigFileError, ErrorSeverity, handle_config_error

logger = logging.getLogger(__name__)

APP_DIR_NAME = "distropack"
CONFIG_FILE_NAME = "config.toml"


def user_config_dir() -> Path:
    """
    Return the platform configuration directory.

    Linux and other Unix systems honour ``XDG_CONFIG_HOME`` and fall back to
    ``~/.config``; macOS uses ``~/Library/Application Support`` and Windows
    ``%APPDATA%``.
    """
    if sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    return Path.home() / ".config"


def default_config_path() -> Path:
    return user_config_dir() / APP_DIR_NAME / CONFIG_FILE_NAME


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Load and parse a TOML file.

    Args:
        file_path: Path to the TOML file to load
        description: Human-readable description for error messages

    Returns:
        Parsed TOML data as a dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigFileError: If the file cannot be read or is malformed
    """
    logger.debug(f"Loading {description} from: {file_path}")

    if not file_path.exists():
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        action = "parse" if isinstance(e, tomllib.TOMLDecodeError) else "read"
        error = ConfigFileError(f"Failed to {action} {description} {file_path}: {e}")
        handle_config_error(
            error=error,
            context=f"loading {description}",
            severity=ErrorSeverity.ERROR,
            reraise=False,
            logger=logger
        )
        raise error from e


def load_cli_config(config_path: Path) -> CliConfig:
    """
    Load the persisted CLI configuration.

    A missing file is equivalent to an empty configuration.

    Raises:
        ConfigFileError: If the file is unreadable, malformed, or holds
            non-string values for known keys
    """
    try:
        data = load_toml_file(config_path, "config file")
    except FileNotFoundError:
        logger.debug(f"No config file at {config_path}, using empty configuration")
        return CliConfig()

    values = {}
    for key in ("api_token", "base_url"):
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigFileError(
                f"Invalid value for '{key}' in {config_path}: expected a string"
            )
        values[key] = value

    unknown = sorted(set(data) - set(values))
    if unknown:
        logger.warning(f"Ignoring unknown keys in {config_path}: {', '.join(unknown)}")

    return CliConfig(**values)


def save_cli_config(config: CliConfig, config_path: Path) -> None:
    """
    Write the CLI configuration, creating the parent directory if needed.

    Raises:
        ConfigFileError: If the directory or file cannot be written
    """
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            toml.dump(config.to_dict(), f)
    except OSError as e:
        error = ConfigFileError(f"Failed to write config file {config_path}: {e}")
        handle_config_error(
            error=error,
            context="saving config file",
            severity=ErrorSeverity.ERROR,
            reraise=False,
            logger=logger
        )
        raise error from e

    logger.info(f"Configuration written to {config_path}")
