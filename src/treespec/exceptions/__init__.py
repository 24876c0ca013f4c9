"""
treespec exception classes.

This package provides all exception types used throughout treespec for
consistent error handling and reporting.
"""

from treespec.exceptions.core import (
    AssertionFailed,
    ConfigurationError,
    DoubleFailure,
    SchedulerStateError,
    TreeSpecError,
    UnimplementedMethodError,
    UnresolvedTypeError,
)

__all__ = [
    "TreeSpecError",
    "AssertionFailed",
    "DoubleFailure",
    "UnresolvedTypeError",
    "UnimplementedMethodError",
    "SchedulerStateError",
    "ConfigurationError",
]
