"""
Entry point for the cache-dirs action.
"""

import sys
import os
from typing import Mapping, Optional

# Add repository root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.config import CacheDirsConfig, get_config
from shared.logging import configure_logging, get_logger, set_run_context

from cache_dirs.app.backends import DirectoryCacheBackend
from cache_dirs.app.inputs import ActionInputs
from cache_dirs.app.models import RunResult
from cache_dirs.app.orchestrator import CacheOrchestrator
from cache_dirs.app.workflow import WorkflowCommands


def report(result: RunResult, workflow: WorkflowCommands) -> int:
    """Publish step outputs or the failure, and return the exit code."""
    if not result.ok:
        workflow.set_failed(result.message or "cache-dirs failed")
        return 1

    workflow.set_output("cache-hit", "true" if result.cache_hit else "false")
    if result.content_hash is not None:
        workflow.set_output("hash", result.content_hash)
    return 0


def run(
    environ: Optional[Mapping[str, str]] = None,
    config: Optional[CacheDirsConfig] = None,
    workflow: Optional[WorkflowCommands] = None,
) -> int:
    """Run the action against ``environ`` and return the exit code."""
    environ = os.environ if environ is None else environ
    config = config or get_config()
    workflow = workflow or WorkflowCommands(environ=environ)

    configure_logging("cache_dirs", config.log_level, config.log_format)
    set_run_context(dict(environ))
    logger = get_logger("cache_dirs.main")

    workspace = config.resolved_workspace()
    backend = DirectoryCacheBackend(config.resolved_store_dir(), workspace=workspace)
    logger.info("Using cache store", backend=backend.name, store_dir=str(backend.store_dir), workspace=str(workspace))

    orchestrator = CacheOrchestrator(backend, workflow=workflow, workspace=workspace)
    result = orchestrator.run(ActionInputs(environ))
    logger.info("Caching step finished", status=result.status.value, cache_hit=result.cache_hit)
    return report(result, workflow)


def main() -> int:
    try:
        return run()
    except KeyboardInterrupt:
        return 130
    except Exception as exc:  # pragma: no cover - CLI surface
        WorkflowCommands().set_failed(f"cache-dirs failed: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
