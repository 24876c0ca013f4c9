"""
Doubles layer.

Exposes double creation and configuration to test bodies and converts
`DoubleFailure` into `Failure`. Options:

- `strict` forbids doubling types that cannot be resolved. Enable it for
  full runs and leave it off when running tests in isolation.
- `auto_verify` checks every double created during a clean execution for
  unconsumed expectations, as if `assert_exhausted` had been called.
"""

import logging

from treespec.core.data_structures import Failure
from treespec.doubles.references import TypeRegistry
from treespec.doubles.session import DoubleSession
from treespec.evaluators.pipeline import Evaluator
from treespec.exceptions import DoubleFailure

logger = logging.getLogger(__name__)

CAPABILITIES = (
    "instance_double",
    "class_double",
    "stub",
    "allow",
    "expect",
    "verify",
    "assert_exhausted",
)


class Doubles(Evaluator):
    """
    Provides test doubles.

    Params:
        strict: Raise when doubling a type that cannot be resolved
        auto_verify: Exhaustion-check every double after a clean execution
        registry: Type registry used to resolve doubled names
    """

    def __init__(
        self,
        strict: bool = False,
        auto_verify: bool = False,
        registry: TypeRegistry | None = None,
    ):
        self.strict = strict
        self.auto_verify = auto_verify
        self.registry = registry

    @classmethod
    def with_options(cls, *options: str, registry: TypeRegistry | None = None) -> "Doubles":
        """
        Build a layer from option names, e.g. `Doubles.with_options("strict", "auto_verify")`.

        Raises:
            ValueError: If an option name is not recognised
        """
        known = {"strict", "auto_verify"}
        unknown = [option for option in options if option not in known]
        if unknown:
            raise ValueError(f"Unknown doubles options: {unknown}. Available: {sorted(known)}")
        return cls(
            strict="strict" in options,
            auto_verify="auto_verify" in options,
            registry=registry,
        )

    def install(self, example) -> None:
        session = DoubleSession(self.registry, strict=self.strict)
        example._attach(self, session)
        for name in CAPABILITIES:
            example._provide(name, getattr(session, name))

    def execute(self, unit_of_work, example, call_next) -> list[Failure]:
        try:
            failures = call_next(unit_of_work, example)
        except DoubleFailure as exc:
            return [Failure.from_exception(unit_of_work, exc, exc.message)]

        if failures or not self.auto_verify:
            return failures

        session: DoubleSession | None = example._attached(self)
        if session is None:
            return failures
        unexhausted = session.unexhausted()
        if unexhausted:
            logger.debug(
                "%d unexhausted doubles in %r", len(unexhausted), unit_of_work.full_name
            )
        return [Failure.from_exception(unit_of_work, exc, exc.message) for exc in unexhausted]
