"""Utility functions for modebridge."""

from modebridge.utils.helpers import ensure_dir, get_data_path, safe_dict, safe_list
from modebridge.utils.exceptions import (
    CncServerError,
    ModeBridgeError,
    ModeLoadError,
    ResourceFileError,
    TransportError,
    ErrorCategory,
    classify_exception,
    skip_on_error,
)

__all__ = [
    "ensure_dir",
    "get_data_path",
    "safe_dict",
    "safe_list",
    "CncServerError",
    "ModeBridgeError",
    "ModeLoadError",
    "ResourceFileError",
    "TransportError",
    "ErrorCategory",
    "classify_exception",
    "skip_on_error",
]
