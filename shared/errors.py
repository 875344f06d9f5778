"""
Shared error handling for cache-dirs.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error report format."""

    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class CacheDirsError(Exception):
    """Base exception for cache-dirs."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error report."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class InputRequiredError(CacheDirsError):
    """A required action input was not supplied."""

    def __init__(self, name: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("INPUT_REQUIRED", f"Input required and not supplied: {name}", details)
        self.name = name


class CacheValidationError(CacheDirsError):
    """Cache key or cache path validation errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_VALIDATION_ERROR", message, details)


class CacheBackendError(CacheDirsError):
    """Cache store errors."""

    def __init__(self, backend: str, message: str = "Cache backend error", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_BACKEND_ERROR", f"{backend}: {message}", details)
