"""
Command-line interface for the distropack package.

This module provides the main CLI entry point for the build service client.
"""

from .main import build_parser, main_cli

__all__ = [
    "build_parser",
    "main_cli",
]
