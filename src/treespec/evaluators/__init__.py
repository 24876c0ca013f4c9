"""
treespec evaluators.

This package provides the execution pipeline and its standard layers:
simple assertions, test doubles and an adapter for external assertion
styles.
"""

from treespec.evaluators.assertions import (
    Simple,
    assert_,
    assert_equal,
    assert_include,
    fail,
)
from treespec.evaluators.doubles import Doubles
from treespec.evaluators.expectations import Expectations
from treespec.evaluators.pipeline import Bottom, Evaluator, Pipeline, Top, stack

DEFAULT_PIPELINE = stack(Simple(), Doubles())

__all__ = [
    "Evaluator",
    "Bottom",
    "Top",
    "Pipeline",
    "stack",
    "Simple",
    "Doubles",
    "Expectations",
    "assert_",
    "assert_equal",
    "assert_include",
    "fail",
    "DEFAULT_PIPELINE",
]
