"""Runtime configuration."""

from .runtime import CacheBackend, RuntimeSettings, get_settings

__all__ = ["CacheBackend", "RuntimeSettings", "get_settings"]
