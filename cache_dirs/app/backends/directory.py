"""
Directory-backed cache store.

Each entry is a ``<digest>.tar.gz`` archive plus a ``<digest>.json`` manifest,
where ``<digest>`` is the SHA-256 of the cache key and entry version. Archive members are named
by the index of the cache path they came from so that entries restore to the
original locations regardless of where the store lives.
"""

import hashlib
import json
import os
import shutil
import tarfile
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from shared.errors import CacheBackendError, CacheValidationError
from shared.logging import get_logger

from .base import CacheBackend, cache_version, validate_key


@dataclass(frozen=True)
class StoredEntry:
    """Manifest of one stored cache entry."""
    key: str
    version: str
    created_at: float
    members: List[str]


class DirectoryCacheBackend(CacheBackend):
    """Cache backend that keeps archives in a local directory."""

    name = "directory"

    def __init__(self, store_dir: Path, workspace: Optional[Path] = None):
        super().__init__(workspace)
        self.store_dir = Path(store_dir)
        self.logger = get_logger("cache_dirs.backends.directory")

    def _entry_stem(self, key: str, version: str) -> Path:
        return self.store_dir / hashlib.sha256(f"{key}|{version}".encode("utf-8")).hexdigest()

    def _load_entry(self, manifest_path: Path) -> Optional[StoredEntry]:
        try:
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
            return StoredEntry(
                key=str(data["key"]),
                version=str(data["version"]),
                created_at=float(data["created_at"]),
                members=[str(m) for m in data["members"]],
            )
        except (OSError, ValueError, KeyError, TypeError) as e:
            self.logger.warning("Skipping unreadable cache manifest", manifest=str(manifest_path), error=str(e))
            return None

    def _entries(self, version: str) -> List[StoredEntry]:
        if not self.store_dir.is_dir():
            return []
        entries = []
        for manifest_path in sorted(self.store_dir.glob("*.json")):
            entry = self._load_entry(manifest_path)
            if entry is not None and entry.version == version:
                entries.append(entry)
        return entries

    def find_entry(self, keys: Sequence[str], version: str) -> Optional[StoredEntry]:
        """Best entry for ``keys``: exact match first, then newest prefix match, per key."""
        entries = self._entries(version)
        for key in keys:
            for entry in entries:
                if entry.key == key:
                    return entry
            prefixed = [e for e in entries if e.key.startswith(key)]
            if prefixed:
                return max(prefixed, key=lambda e: e.created_at)
        return None

    def restore(self, paths: Sequence[str], primary_key: str, restore_keys: Optional[Sequence[str]] = None) -> Optional[str]:
        keys = [primary_key, *(restore_keys or [])]
        for key in keys:
            validate_key(key)

        entry = self.find_entry(keys, cache_version(paths))
        if entry is None:
            self.logger.info("Cache not found", keys=keys)
            return None

        targets = self.resolve_paths(paths)
        archive = self._entry_stem(entry.key, entry.version).with_suffix(".tar.gz")
        try:
            with tempfile.TemporaryDirectory(dir=self.store_dir) as tmp:
                with tarfile.open(archive, "r:gz") as tar:
                    tar.extractall(tmp, filter="tar")
                for member in entry.members:
                    self._place(Path(tmp) / member, targets[int(member)])
        except (OSError, tarfile.TarError, IndexError, ValueError) as e:
            self.logger.error("Failed to restore cache", key=entry.key, error=str(e))
            raise CacheBackendError(self.name, f"failed to restore {entry.key}: {e}")

        self.logger.info("Cache restored", key=entry.key, archive=str(archive))
        return entry.key

    @staticmethod
    def _place(source: Path, target: Path) -> None:
        if source.is_dir():
            shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target, follow_symlinks=False)

    def save(self, paths: Sequence[str], key: str) -> str:
        validate_key(key)

        resolved = self.resolve_paths(paths)
        existing = [(i, p) for i, p in enumerate(resolved) if p.exists()]
        if not existing:
            raise CacheValidationError(
                "Path Validation Error: Path(s) specified in the action for caching do(es) not exist, "
                "hence no cache is being saved.",
                {"paths": list(paths)}
            )

        version = cache_version(paths)
        stem = self._entry_stem(key, version)
        manifest_path = stem.with_suffix(".json")
        if manifest_path.exists():
            current = self._load_entry(manifest_path)
            if current is not None and current.version == version:
                self.logger.info("Cache entry already exists, not overwriting", key=key)
                return key

        try:
            self.store_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.store_dir, suffix=".tar.gz.tmp")
            os.close(fd)
            try:
                with tarfile.open(tmp_name, "w:gz") as tar:
                    for index, path in existing:
                        tar.add(str(path), arcname=str(index))
                os.replace(tmp_name, stem.with_suffix(".tar.gz"))
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

            manifest = {
                "key": key,
                "version": version,
                "created_at": time.time(),
                "members": [str(index) for index, _ in existing],
                "paths": list(paths),
            }
            manifest_path.write_text(json.dumps(manifest, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        except (OSError, tarfile.TarError) as e:
            self.logger.error("Failed to save cache", key=key, error=str(e))
            raise CacheBackendError(self.name, f"failed to save {key}: {e}")

        self.logger.info("Cache saved", key=key, size_bytes=stem.with_suffix(".tar.gz").stat().st_size)
        return key
