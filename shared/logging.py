"""
Shared logging configuration for cache-dirs.
"""

import sys
import structlog
import logging
import os
import time
from typing import Any, Dict, Optional
from contextvars import ContextVar

# Context variables for correlating log lines with a workflow run
run_id_var: ContextVar[Optional[str]] = ContextVar('run_id', default=None)
job_var: ContextVar[Optional[str]] = ContextVar('job', default=None)


def configure_logging(service_name: str, log_level: str = "info", log_format: str = "console") -> None:
    """Configure structured logging for the action."""

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            add_run_context,
            add_timestamp,
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
        force=True,
    )
    logging.getLogger(service_name).setLevel(getattr(logging, log_level.upper()))


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context to log events."""
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        event_dict["service"] = logger_name.split(".")[0]

    return event_dict


def add_run_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add workflow run context to log events."""
    run_id = run_id_var.get()
    if run_id:
        event_dict["run_id"] = run_id

    job = job_var.get()
    if job:
        event_dict["job"] = job

    return event_dict


def add_timestamp(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add high-precision timestamp to log events."""
    event_dict["timestamp"] = time.time()
    return event_dict


def set_run_context(environ: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Bind the runner's run id and job name, if present, to the log context."""
    if environ is None:
        environ = dict(os.environ)
    run_id = environ.get("GITHUB_RUN_ID")
    job = environ.get("GITHUB_JOB")
    if run_id:
        run_id_var.set(run_id)
    if job:
        job_var.set(job)
    return run_id


def clear_context():
    """Clear all context variables."""
    run_id_var.set(None)
    job_var.set(None)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
