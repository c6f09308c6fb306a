"""
Storage Layer.

This package handles all data persistence: the cache file format, the buffered
cache store and manager built on it, and the configuration file.
"""

from .cache import CacheManager
from .cache_base import CacheStore
from .config_manager import ConfigManager

__all__ = ["CacheManager", "CacheStore", "ConfigManager"]
