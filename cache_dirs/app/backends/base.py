"""
Cache backend contract.
"""

import hashlib
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from shared.errors import CacheValidationError

MAX_KEY_LENGTH = 512


def validate_key(key: str) -> None:
    """Reject keys the hosted cache service would refuse."""
    if len(key) > MAX_KEY_LENGTH:
        raise CacheValidationError(
            f"Key Validation Error: {key} cannot be larger than {MAX_KEY_LENGTH} characters.",
            {"key_length": len(key)}
        )
    if "," in key:
        raise CacheValidationError(f"Key Validation Error: {key} cannot contain commas.")


def cache_version(paths: Sequence[str]) -> str:
    """Version stamp of an entry; entries only match the same path list."""
    return hashlib.sha256("|".join(paths).encode("utf-8")).hexdigest()


class CacheBackend(ABC):
    """Key-addressed store for directory trees."""

    name = "backend"

    def __init__(self, workspace: Optional[Path] = None):
        self.workspace = workspace if workspace is not None else Path.cwd()

    def resolve_path(self, path: str) -> Path:
        """Absolute location of a cache path, ``~`` expanded."""
        p = Path(os.path.expanduser(path))
        if not p.is_absolute():
            p = self.workspace / p
        return Path(os.path.normpath(p))

    def resolve_paths(self, paths: Sequence[str]) -> List[Path]:
        return [self.resolve_path(p) for p in paths]

    @abstractmethod
    def restore(self, paths: Sequence[str], primary_key: str, restore_keys: Optional[Sequence[str]] = None) -> Optional[str]:
        """Restore ``paths`` from the best matching entry.

        Returns the matched key, or None on a miss.
        """

    @abstractmethod
    def save(self, paths: Sequence[str], key: str) -> str:
        """Store ``paths`` under ``key`` and return the key."""
