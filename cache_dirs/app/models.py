"""
Data models for the cache-dirs action.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class CacheInputs(BaseModel):
    """Validated action inputs for one run."""
    cache_paths: List[str]
    key_template: str
    invalidation_pattern: str
    key_values: Dict[str, str] = Field(default_factory=dict)


class RunStatus(str, Enum):
    """Outcome of a run."""
    SUCCESS = "success"
    NOOP = "noop"
    FAILED = "failed"


class PathOutcome(BaseModel):
    """Restore/save result for a single cache path."""
    path: str
    restore_key: str
    matched_key: Optional[str] = None
    saved_key: Optional[str] = None

    @property
    def hit(self) -> bool:
        return self.matched_key is not None


class RunResult(BaseModel):
    """Result of a full run, reported to the runner by the entry point."""
    status: RunStatus
    message: Optional[str] = None
    content_hash: Optional[str] = None
    outcomes: List[PathOutcome] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status != RunStatus.FAILED

    @property
    def cache_hit(self) -> bool:
        """True when every cache path was restored."""
        return bool(self.outcomes) and all(o.hit for o in self.outcomes)
