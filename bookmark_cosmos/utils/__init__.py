"""
Utility modules for Bookmark Cosmos.

This package contains logging setup and API key handling helpers.
"""

from .api_key_validator import APIKeyValidator
from .logging_setup import setup_logging

__all__ = ["APIKeyValidator", "setup_logging"]
