"""
Core treespec entity model.

This package provides the context tree, the immutable unit-of-work records
and the helpers used to render them in reports.
"""

from treespec.core.context import Context, Example, HelperMethod, Memoized
from treespec.core.data_structures import (
    CodeException,
    ExecutedUnitOfWork,
    Failure,
    NestedUnitOfWork,
    UnitOfWork,
)
from treespec.core.declarations import DSL
from treespec.core.inspection import debug_repr, format_trace, render_call
from treespec.core.short_id import SHORT_ID_LENGTH, default_short_id

__all__ = [
    "Context",
    "Example",
    "Memoized",
    "HelperMethod",
    "DSL",
    "UnitOfWork",
    "NestedUnitOfWork",
    "ExecutedUnitOfWork",
    "Failure",
    "CodeException",
    "debug_repr",
    "render_call",
    "format_trace",
    "default_short_id",
    "SHORT_ID_LENGTH",
]
