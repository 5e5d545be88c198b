"""Shared primitives: results, lookups, exit codes and settings."""

from .errors import ErrorCode
from .lookup import Found, Lookup, NotFound, Unavailable, is_found
from .result import Err, Ok, Result, is_err, is_ok
from .settings import ConfigError, Settings, load_settings

__all__ = [
    # errors
    "ErrorCode",
    # lookup
    "Found",
    "Lookup",
    "NotFound",
    "Unavailable",
    "is_found",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # settings
    "ConfigError",
    "Settings",
    "load_settings",
]
