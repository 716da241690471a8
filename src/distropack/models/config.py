"""
Configuration data models.

This module contains the persisted CLI configuration and the resolved view
of it shown by ``config show``.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass
class CliConfig:
    """
    Contents of the persisted `config.toml`. Either field may be unset.
    """

    api_token: Optional[str] = None
    base_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """TOML-ready mapping; unset fields are left out."""
        data = {}
        if self.api_token is not None:
            data["api_token"] = self.api_token
        if self.base_url is not None:
            data["base_url"] = self.base_url
        return data


@dataclass
class ConfigSummary:
    """
    Effective configuration together with where each value came from.
    """

    config_path: Path
    base_url: str
    base_url_source: str  # "environment", "config file" or "default"
    masked_token: Optional[str]
    token_source: str  # "environment", "config file" or "not set"
