"""
Cache key templating.

Templates use ``{name}`` placeholders. Everything except ``{path}`` and
``{hash}`` is resolved once per run; those two are filled in per cache path.
"""

import re
from typing import Dict, List, Optional

PLACEHOLDER_RE = re.compile(r"{(.*?)}")
UNSAFE_PATH_CHARS_RE = re.compile(r"[^A-Za-z0-9_]")

PATH_TOKEN = "{path}"
HASH_TOKEN = "{hash}"
PER_PATH_PLACEHOLDERS = ("path", "hash")


def extract_placeholders(template: str) -> List[str]:
    """Return every ``{...}`` token in template order, duplicates included."""
    return [m.group(0) for m in PLACEHOLDER_RE.finditer(template)]


def placeholder_name(token: str) -> str:
    return token[1:-1]


def default_value(name: str, platform: str) -> Optional[str]:
    """Fallback for a placeholder with no ``key-<name>`` input."""
    if name == "prefix":
        return f"{platform}-"
    return None


def resolve_template(template: str, values: Dict[str, str], platform: str) -> str:
    """Substitute run-wide placeholders in ``template``.

    Each token is replaced globally by its ``key-<name>`` value, the platform
    default for ``prefix``, or the empty string. ``{path}`` and ``{hash}`` stay
    in place unless a value was supplied for them.
    """
    for token in extract_placeholders(template):
        name = placeholder_name(token)
        value = values.get(name)
        if not value:
            value = default_value(name, platform)
        if value is None:
            if name in PER_PATH_PLACEHOLDERS:
                continue
            value = ""
        template = template.replace(token, value)
    return template


def sanitize_path(path: str) -> str:
    """Map every character outside ``[A-Za-z0-9_]`` to ``_``."""
    return UNSAFE_PATH_CHARS_RE.sub("_", path)


def restore_key_for(resolved_template: str, path: str) -> str:
    return resolved_template.replace(PATH_TOKEN, sanitize_path(path), 1).replace(HASH_TOKEN, "", 1)


def save_key_for(restore_key: str, content_hash: str) -> str:
    return f"{restore_key}-{content_hash}"
