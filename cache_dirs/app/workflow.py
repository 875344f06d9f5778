"""
Workflow commands understood by the CI runner.

Annotations are printed as ``::warning::`` / ``::error::`` lines on stdout and
step outputs are appended to the file named by ``$GITHUB_OUTPUT``.
"""

import os
import sys
import uuid
from typing import Mapping, Optional, TextIO


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowCommands:
    """Reports warnings, failures and outputs to the runner."""

    def __init__(self, stream: Optional[TextIO] = None, environ: Optional[Mapping[str, str]] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self.failed = False

    def issue(self, command: str, message: str) -> None:
        self.stream.write(f"::{command}::{escape_data(message)}\n")
        self.stream.flush()

    def warning(self, message: str) -> None:
        self.issue("warning", message)

    def error(self, message: str) -> None:
        self.issue("error", message)

    def set_failed(self, message: str) -> None:
        """Mark the step as failed; the entry point exits non-zero."""
        self.failed = True
        self.error(message)

    def set_output(self, name: str, value: str) -> None:
        output_file = self.environ.get("GITHUB_OUTPUT")
        if output_file:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            with open(output_file, "a", encoding="utf-8") as f:
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            self.stream.write("\n")
            self.stream.write(f"::set-output name={name}::{escape_data(value)}\n")
            self.stream.flush()
