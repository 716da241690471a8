"""
Configuration management for the distropack package.

This module provides a clean interface for loading, saving and resolving
the CLI configuration from environment variables and a TOML file.
"""

# Main configuration interface
from .manager import (
    BASE_URL_ENV_VAR,
    CONFIG_PATH_ENV_VAR,
    DEFAULT_BASE_URL,
    TOKEN_ENV_VAR,
    clear_config_cache,
    describe_config,
    get_config,
    get_config_path,
    mask_token,
    resolve_base_url,
    resolve_token,
    set_base_url,
    set_config_path,
    set_token,
)

# For advanced usage - direct access to the file layer
from .loader import (
    default_config_path,
    load_cli_config,
    load_toml_file,
    save_cli_config,
    user_config_dir,
)

__all__ = [
    # Main interface
    "get_config",
    "get_config_path",
    "set_config_path",
    "clear_config_cache",
    "resolve_token",
    "resolve_base_url",
    "set_token",
    "set_base_url",
    "describe_config",
    "mask_token",
    "TOKEN_ENV_VAR",
    "BASE_URL_ENV_VAR",
    "CONFIG_PATH_ENV_VAR",
    "DEFAULT_BASE_URL",
    # File layer
    "load_toml_file",
    "load_cli_config",
    "save_cli_config",
    "default_config_path",
    "user_config_dir",
]
