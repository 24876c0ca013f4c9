"""
Adapter for third-party assertion styles.

`Expectations` exposes externally supplied assertion helpers to test bodies
and converts the failure conditions they raise into `Failure` values. Most
Python assertion libraries (and bare `assert` statements) raise
`AssertionError`, which is recognised by default.
"""

import unittest
from collections.abc import Callable, Mapping
from typing import Any

from treespec.core.data_structures import Failure
from treespec.evaluators.pipeline import Evaluator


class Expectations(Evaluator):
    """
    Provides external assertion helpers.

    Params:
        recognized: Exception types turned into failures
        helpers: Name to helper mapping, or a factory returning one per execution
    """

    def __init__(
        self,
        recognized: tuple[type[BaseException], ...] = (AssertionError,),
        helpers: Mapping[str, Any] | Callable[[], Mapping[str, Any]] | None = None,
    ):
        self.recognized = tuple(recognized)
        self.helpers = helpers

    @classmethod
    def unittest(cls) -> "Expectations":
        """Expose the `assert*` methods of `unittest.TestCase`, e.g. `t.assertIn(1, [1])`."""

        def testcase_assertions() -> dict[str, Any]:
            case = unittest.TestCase()
            return {
                name: getattr(case, name)
                for name in dir(case)
                if name.startswith("assert") and callable(getattr(case, name))
            }

        return cls(recognized=(AssertionError,), helpers=testcase_assertions)

    def install(self, example) -> None:
        helpers = self.helpers() if callable(self.helpers) else self.helpers
        for name, helper in (helpers or {}).items():
            example._provide(name, helper)

    def execute(self, unit_of_work, example, call_next) -> list[Failure]:
        try:
            return call_next(unit_of_work, example)
        except self.recognized as exc:
            return [Failure.from_exception(unit_of_work, exc)]
