"""
Simple assertions.

Straightforward assertion helpers raising `AssertionFailed`, and the
`Simple` layer that exposes them to test bodies and turns the raised
condition into a `Failure`.
"""

from typing import Any

from treespec.core.data_structures import Failure
from treespec.core.inspection import debug_repr
from treespec.evaluators.pipeline import Evaluator
from treespec.exceptions import AssertionFailed


def assert_(proposition: Any, message: str | None = None) -> None:
    """Fail unless `proposition` is truthy."""
    if not proposition:
        raise AssertionFailed(message or "assertion failed")


def assert_equal(expected: Any, actual: Any) -> None:
    """
    Fail unless `expected == actual`.

    The failure message has exactly two lines, `want: <expected>` and
    `got: <actual>`, both in debug representation.
    """
    if not expected == actual:
        raise AssertionFailed(f"want: {debug_repr(expected)}\ngot: {debug_repr(actual)}")


def assert_include(expected: Any, output: Any) -> None:
    """Fail unless `expected in output`."""
    assert_(
        expected in output,
        f"{debug_repr(expected)} not present in: {debug_repr(output)}",
    )


def fail(message: str | None = None) -> None:
    """Fail unconditionally."""
    raise AssertionFailed(message or "failed")


ASSERTIONS = {
    "assert_": assert_,
    "assert_true": assert_,
    "assert_equal": assert_equal,
    "assert_include": assert_include,
    "fail": fail,
}


class Simple(Evaluator):
    """Provides the simple assertions and converts their failures."""

    def install(self, example) -> None:
        for name, assertion in ASSERTIONS.items():
            example._provide(name, assertion)

    def execute(self, unit_of_work, example, call_next) -> list[Failure]:
        try:
            return call_next(unit_of_work, example)
        except AssertionFailed as exc:
            return [Failure.from_exception(unit_of_work, exc, exc.message)]
