"""
Shared utilities for cache-dirs.

This package aggregates common building blocks consumed by the action:

- config: Runtime settings via pydantic-settings
- logging: Structured logging with workflow run correlation
- errors: Canonical error types and reports

Do not import from cache_dirs into shared/.
"""
