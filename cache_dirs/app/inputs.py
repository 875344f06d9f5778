"""
Action input handling.

A workflow runner passes ``with:`` inputs to an action as ``INPUT_<NAME>``
environment variables. ``ActionInputs`` reads them from an explicitly passed
mapping so a run never depends on ambient process state.
"""

import os
from typing import Dict, List, Mapping, Optional

from shared.errors import InputRequiredError
from shared.logging import get_logger

from .keys import extract_placeholders, placeholder_name
from .models import CacheInputs


class ActionInputs:
    """Reader for action inputs."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ: Mapping[str, str] = os.environ if environ is None else environ

    @staticmethod
    def env_name(name: str) -> str:
        """Environment variable carrying input ``name``."""
        return "INPUT_" + name.replace(" ", "_").upper()

    def get_input(self, name: str, required: bool = False) -> str:
        """Return the stripped input value, or '' when it is not set."""
        value = self.environ.get(self.env_name(name), "")
        if required and not value:
            raise InputRequiredError(name)
        return value.strip()


def parse_cache_paths(raw: str) -> List[str]:
    """Split the ``;``-delimited path list, dropping empty entries."""
    return [p.strip() for p in raw.split(";") if p.strip()]


def load_inputs(reader: ActionInputs) -> CacheInputs:
    """Build ``CacheInputs`` from the action inputs."""
    logger = get_logger("cache_dirs.inputs")

    cache_paths = parse_cache_paths(reader.get_input("cache-paths", required=True))
    key_template = reader.get_input("key-template", required=True)
    pattern = reader.get_input("cache-invalidation-pattern", required=True)

    key_values: Dict[str, str] = {}
    for token in extract_placeholders(key_template):
        name = placeholder_name(token)
        value = reader.get_input(f"key-{name}")
        if value:
            key_values[name] = value

    logger.debug("Loaded inputs", placeholders=sorted(key_values))

    return CacheInputs(
        cache_paths=cache_paths,
        key_template=key_template,
        invalidation_pattern=pattern,
        key_values=key_values,
    )
