"""
SPS exception classes.

This package provides all exception types used throughout SPS for consistent
error handling and reporting.
"""

from sps.exceptions.core import (
    AllocationError,
    CellIndexError,
    ConfigurationError,
    ErrorContext,
    InvalidArgumentError,
    MalformedInputError,
    NoNumericValueError,
    SPSError,
    StateError,
    UnknownCommandError,
)

__all__ = [
    "SPSError",
    "ErrorContext",
    "AllocationError",
    "MalformedInputError",
    "UnknownCommandError",
    "InvalidArgumentError",
    "CellIndexError",
    "StateError",
    "NoNumericValueError",
    "ConfigurationError",
]
