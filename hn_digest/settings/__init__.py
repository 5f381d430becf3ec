"""Application settings loading."""

from .app import AppSettings, get_settings
from .config import ConfigurationError, DigestConfig


__all__ = ["AppSettings", "ConfigurationError", "DigestConfig", "get_settings"]
