"""
Cache backends for the cache-dirs action.

A backend stores directory trees under string keys. ``DirectoryCacheBackend``
keeps one compressed archive per key in a local store directory, which suits
self-hosted runners with a persistent disk.
"""

from .base import CacheBackend, cache_version, validate_key
from .directory import DirectoryCacheBackend

__all__ = [
    "CacheBackend",
    "DirectoryCacheBackend",
    "cache_version",
    "validate_key",
]
