"""
Cache orchestration.

One run restores every cache path from the backend under a key rendered from
the key template and, for paths with no matching entry, saves a new entry
whose key carries the hash of the trigger files.
"""

import sys
from pathlib import Path
from typing import List, Optional

from shared.errors import CacheDirsError
from shared.logging import get_logger

from .backends import CacheBackend
from .hashing import compute_content_hash
from .inputs import ActionInputs, load_inputs
from .keys import resolve_template, restore_key_for, save_key_for
from .models import CacheInputs, PathOutcome, RunResult, RunStatus
from .workflow import WorkflowCommands

NO_PATHS_WARNING = (
    "None of the cache paths exist, skipping caching step. "
    "Note that the workflow should adapt to this!"
)


class CacheOrchestrator:
    """Restores or populates the cache for a set of paths."""

    def __init__(
        self,
        backend: CacheBackend,
        workflow: Optional[WorkflowCommands] = None,
        workspace: Optional[Path] = None,
        platform: Optional[str] = None,
    ):
        self.backend = backend
        self.workflow = workflow or WorkflowCommands()
        self.workspace = workspace if workspace is not None else backend.workspace
        self.platform = platform or sys.platform
        self.logger = get_logger("cache_dirs.orchestrator")

    def run(self, reader: ActionInputs) -> RunResult:
        """Read inputs and execute; every error becomes a failed result."""
        try:
            return self.execute(load_inputs(reader))
        except CacheDirsError as e:
            error = e.to_response()
            self.logger.error("Caching step failed", code=error.code, message=error.message, details=error.details)
            return RunResult(status=RunStatus.FAILED, message=e.message)
        except Exception as e:
            self.logger.error("Caching step failed", error=str(e), error_type=type(e).__name__)
            return RunResult(status=RunStatus.FAILED, message=str(e))

    def any_path_exists(self, paths: List[str]) -> bool:
        return any(self.backend.resolve_path(p).exists() for p in paths)

    def execute(self, inputs: CacheInputs) -> RunResult:
        self.logger.info(
            "Cache configuration",
            cache_paths=inputs.cache_paths,
            key_template=inputs.key_template,
            invalidation_pattern=inputs.invalidation_pattern,
        )

        if not self.any_path_exists(inputs.cache_paths):
            self.workflow.warning(NO_PATHS_WARNING)
            return RunResult(status=RunStatus.NOOP, message=NO_PATHS_WARNING)

        content_hash, _files = compute_content_hash(inputs.invalidation_pattern, self.workspace)
        self.logger.info("Computed content hash", content_hash=content_hash)

        template = resolve_template(inputs.key_template, inputs.key_values, self.platform)

        outcomes = [self._process_path(path, template, content_hash) for path in inputs.cache_paths]
        return RunResult(status=RunStatus.SUCCESS, content_hash=content_hash, outcomes=outcomes)

    def _process_path(self, path: str, template: str, content_hash: str) -> PathOutcome:
        restore_key = restore_key_for(template, path)
        self.logger.info("Restoring cache", path=path, key=restore_key)

        outcome = PathOutcome(path=path, restore_key=restore_key)
        matched = self.backend.restore([path], restore_key, [])
        if matched:
            outcome.matched_key = matched
            self.logger.info("Cache hit", path=path, key=matched)
            return outcome

        outcome.saved_key = self.backend.save([path], save_key_for(restore_key, content_hash))
        self.logger.info("Cache missed, new cache saved", path=path, key=outcome.saved_key)
        return outcome
