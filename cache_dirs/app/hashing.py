"""
Trigger file discovery and content hashing.
"""

import glob
import hashlib
import os
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

from shared.logging import get_logger

HASH_CHUNK_SIZE = 1024 * 1024


def parse_patterns(pattern: str) -> Tuple[List[str], List[str]]:
    """Split a multi-line pattern into (include, exclude) lists."""
    include: List[str] = []
    exclude: List[str] = []
    for line in pattern.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("!"):
            line = line[1:].strip()
            if line:
                exclude.append(os.path.expanduser(line))
        else:
            include.append(os.path.expanduser(line))
    return include, exclude


def _expand(pattern: str, root: Path) -> Set[Path]:
    if os.path.isabs(pattern):
        hits = glob.glob(pattern, recursive=True, include_hidden=True)
    else:
        hits = [
            os.path.join(root, hit)
            for hit in glob.glob(pattern, root_dir=root, recursive=True, include_hidden=True)
        ]

    matched: Set[Path] = set()
    for hit in hits:
        p = Path(hit)
        if p.is_dir():
            matched.update(c for c in p.rglob("*") if c.is_file())
        elif p.is_file():
            matched.add(p)
    return matched


def find_trigger_files(pattern: str, root: Optional[Path] = None) -> List[Path]:
    """Expand ``pattern`` into the sorted list of trigger files.

    Lines starting with ``!`` remove matches, ``#`` lines are comments and a
    matched directory contributes every file beneath it.
    """
    root = root if root is not None else Path.cwd()
    include, exclude = parse_patterns(pattern)

    matched: Set[Path] = set()
    for p in include:
        matched |= _expand(p, root)
    for p in exclude:
        matched -= _expand(p, root)

    return sorted(matched, key=lambda p: str(p))


def hash_files(paths: Iterable[Path]) -> str:
    """Return ``-`` plus the hex SHA-1 of the files' bytes in order."""
    h = hashlib.sha1()
    for path in paths:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
                h.update(chunk)
    return "-" + h.hexdigest()


def compute_content_hash(pattern: str, root: Optional[Path] = None) -> Tuple[str, List[Path]]:
    """Find trigger files for ``pattern`` and hash them."""
    logger = get_logger("cache_dirs.hashing")
    files = find_trigger_files(pattern, root)
    logger.info("Trigger files that affect the cache", files=[str(f) for f in files])
    return hash_files(files), files
