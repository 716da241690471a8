"""
Configuration management and value resolution.

Values are resolved in a fixed order: environment variable, then the
persisted config file, then a built-in default. The config file is loaded
once and cached; ``set_config_path`` and ``clear_config_cache`` reset it.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Tuple

from ..models.config import CliConfig, ConfigSummary
from ..validation import (
    ConfigMissingError,
    is_valid_token_format,
    validate_base_url,
    validate_non_empty,
)
from .loader import default_config_path, load_cli_config, save_cli_config

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "DISTROPACK_API_TOKEN"
BASE_URL_ENV_VAR = "DISTROPACK_API_URL"
CONFIG_PATH_ENV_VAR = "DISTROPACK_CONFIG"

DEFAULT_BASE_URL = "https://distropack.dev"

SOURCE_ENVIRONMENT = "environment"
SOURCE_CONFIG_FILE = "config file"
SOURCE_DEFAULT = "default"
SOURCE_NOT_SET = "not set"

TOKEN_MISSING_MESSAGE = (
    "API token not set. Use 'distropack-cli config set-token <token>' "
    f"or set {TOKEN_ENV_VAR} environment variable"
)

# --- Cached configuration ---

_CONFIG: Optional[CliConfig] = None

# Explicit override of the config file location (tests, embedding).
_CONFIG_FILE_PATH: Optional[Path] = None


def set_config_path(config_path: Optional[Path]) -> None:
    """
    Override the configuration file location.

    Passing None restores the default lookup. The cached configuration is
    dropped so the next access reads the new file.
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path) if config_path is not None else None
    _CONFIG = None
    logger.debug(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """Drop the cached configuration, forcing a reload on next access."""
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def get_config_path() -> Path:
    """Path of the config file: explicit override, then $DISTROPACK_CONFIG, then the platform default."""
    if _CONFIG_FILE_PATH is not None:
        return _CONFIG_FILE_PATH
    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return default_config_path()


def get_config() -> CliConfig:
    """
    Get the persisted configuration, loading it on first access.

    Raises:
        ConfigFileError: If the config file exists but cannot be parsed
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_cli_config(get_config_path())
    return _CONFIG


def _env_value(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value:
        return value
    return None


def _token_with_source(config: CliConfig) -> Tuple[Optional[str], str]:
    token = _env_value(TOKEN_ENV_VAR)
    if token is not None:
        return token, SOURCE_ENVIRONMENT
    if config.api_token:
        return config.api_token, SOURCE_CONFIG_FILE
    return None, SOURCE_NOT_SET


def _base_url_with_source(config: CliConfig) -> Tuple[str, str]:
    url = _env_value(BASE_URL_ENV_VAR)
    if url is not None:
        return url.rstrip("/"), SOURCE_ENVIRONMENT
    if config.base_url:
        return config.base_url.rstrip("/"), SOURCE_CONFIG_FILE
    return DEFAULT_BASE_URL, SOURCE_DEFAULT


def resolve_token(config: Optional[CliConfig] = None) -> str:
    """
    Resolve the API token.

    Args:
        config: Persisted configuration; defaults to ``get_config()``

    Returns:
        The environment token if set and non-empty, else the config file token

    Raises:
        ConfigMissingError: If neither source provides a token
    """
    token, source = _token_with_source(config if config is not None else get_config())
    if token is None:
        raise ConfigMissingError(TOKEN_MISSING_MESSAGE)
    logger.debug(f"Using API token from {source}")
    return token


def resolve_base_url(config: Optional[CliConfig] = None) -> str:
    """Resolve the service base URL: environment, config file, then the default."""
    url, source = _base_url_with_source(config if config is not None else get_config())
    logger.debug(f"Using base URL {url} from {source}")
    return url


def mask_token(token: str) -> str:
    """Mask a token for display, keeping its first and last four characters."""
    if len(token) < 8:
        return "****"
    return f"{token[:4]}...{token[-4:]}"


def set_token(token: str) -> Path:
    """
    Persist the API token.

    Returns:
        Path of the written config file
    """
    token = validate_non_empty(token, field_name="token")
    if not is_valid_token_format(token):
        logger.warning("API token looks unusually short; saving it anyway")

    config_path = get_config_path()
    config = load_cli_config(config_path)
    config.api_token = token
    save_cli_config(config, config_path)
    clear_config_cache()
    return config_path


def set_base_url(url: str) -> str:
    """
    Persist the service base URL.

    Returns:
        The normalized URL that was saved
    """
    url = validate_base_url(url, field_name="base URL")

    config_path = get_config_path()
    config = load_cli_config(config_path)
    config.base_url = url
    save_cli_config(config, config_path)
    clear_config_cache()
    return url


def describe_config() -> ConfigSummary:
    """Summarize the effective configuration for ``config show``."""
    config = get_config()
    token, token_source = _token_with_source(config)
    base_url, base_url_source = _base_url_with_source(config)
    return ConfigSummary(
        config_path=get_config_path(),
        base_url=base_url,
        base_url_source=base_url_source,
        masked_token=mask_token(token) if token is not None else None,
        token_source=token_source,
    )
