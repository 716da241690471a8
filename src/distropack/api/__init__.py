"""
Remote service access for the distropack package.
"""

from .client import ApiClient

__all__ = [
    "ApiClient",
]
