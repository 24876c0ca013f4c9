"""
TreeSpec - A modular, rspec-inspired test execution framework

TreeSpec organises tests into a tree of contexts and runs them through a
composable pipeline of evaluator layers, reporting progress to notifiers.
"""

from importlib.metadata import version

from treespec.config import RunConfig
from treespec.core import Context, Example
from treespec.dsl import (
    Spec,
    describe,
    helper,
    include_context,
    it,
    let,
    run,
    shared_context,
)
from treespec.evaluators import DEFAULT_PIPELINE, Doubles, Expectations, Simple, stack

__version__ = version("treespec")

__all__ = [
    "__version__",
    "Spec",
    "describe",
    "it",
    "let",
    "helper",
    "shared_context",
    "include_context",
    "run",
    "RunConfig",
    "Context",
    "Example",
    "stack",
    "Simple",
    "Doubles",
    "Expectations",
    "DEFAULT_PIPELINE",
]
