"""
Data Models Layer.

This package contains the item contract every cached object implements and the
Pydantic model that validates cache configuration.
"""

from .comparable import RemoveFilter, SilkComparable
from .config import CacheConfig, get_default_cache_dir

__all__ = ["CacheConfig", "RemoveFilter", "SilkComparable", "get_default_cache_dir"]
