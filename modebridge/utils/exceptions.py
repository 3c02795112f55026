"""
Exception hierarchy and error handling utilities for modebridge.

Provides:
- Custom exception classes with error codes
- Error categorization (recoverable, fatal, validation, not found)
- A helper that logs and swallows per-item failures
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Callable, TypeVar

from loguru import logger

T = TypeVar("T")


class ErrorCategory(Enum):
    """Error categories for classification."""
    RECOVERABLE = "recoverable"
    FATAL = "fatal"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


class ModeBridgeError(Exception):
    """Base exception for all modebridge errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ModeLoadError(ModeBridgeError):
    """The mode's package descriptor or base path cannot be resolved. Aborts boot."""

    def __init__(self, message: str, path: str | None = None):
        details = {"path": path} if path else {}
        super().__init__(message, code="MODE_LOAD_FAILED", category=ErrorCategory.FATAL, details=details)


class ResourceFileError(ModeBridgeError):
    """A single translation resource file is unusable."""

    def __init__(self, path: str, message: str):
        super().__init__(
            f"Bad language file {path}: {message}",
            code="RESOURCE_FILE_INVALID",
            category=ErrorCategory.RECOVERABLE,
            details={"path": path},
        )


class TransportError(ModeBridgeError):
    """Malformed IPC frame."""

    def __init__(self, message: str, raw: str | None = None):
        details = {"raw": raw[:200]} if raw else {}
        super().__init__(message, code="TRANSPORT_FRAME_INVALID", category=ErrorCategory.VALIDATION, details=details)


class CncServerError(ModeBridgeError):
    """The cncserver API could not be reached or answered badly."""

    def __init__(self, message: str, url: str | None = None):
        details = {"url": url} if url else {}
        super().__init__(message, code="CNCSERVER_ERROR", category=ErrorCategory.RECOVERABLE, details=details)


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory]:
    """Classify an exception and return (error_code, category)."""
    if isinstance(exc, ModeBridgeError):
        return exc.code, exc.category

    if isinstance(exc, FileNotFoundError):
        return "FILE_NOT_FOUND", ErrorCategory.NOT_FOUND

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.VALIDATION

    if isinstance(exc, (ValueError, KeyError, TypeError)):
        return "INVALID_VALUE", ErrorCategory.VALIDATION

    if isinstance(exc, OSError):
        return "IO_ERROR", ErrorCategory.RECOVERABLE

    return "INTERNAL_ERROR", ErrorCategory.FATAL


def skip_on_error(
    func: Callable[..., T],
    *args: Any,
    what: str = "item",
    default: T | None = None,
    **kwargs: Any,
) -> T | None:
    """Run a per-item step; log and return ``default`` when it fails."""
    try:
        return func(*args, **kwargs)
    except Exception as e:
        code, category = classify_exception(e)
        logger.error("Skipping {} [{} / {}]: {}", what, code, category.value, e)
        return default
