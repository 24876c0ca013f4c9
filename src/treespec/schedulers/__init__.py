"""
treespec schedulers.

This package provides the execution policies that walk a context tree:
serial, threaded and filtered.
"""

from treespec.schedulers.base import RunState, Scheduler
from treespec.schedulers.filter import Filter, FilteredContext
from treespec.schedulers.serial import Serial
from treespec.schedulers.threaded import Threaded

__all__ = [
    "RunState",
    "Scheduler",
    "Serial",
    "Threaded",
    "Filter",
    "FilteredContext",
]
