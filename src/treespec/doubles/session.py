"""Per-execution double bookkeeping used by the `Doubles` evaluator layer."""

from treespec.doubles.double import Double, Proxy
from treespec.doubles.references import (
    ClassReference,
    InstanceReference,
    Reference,
    TypeRegistry,
    default_registry,
)
from treespec.exceptions import DoubleFailure


class DoubleSession:
    """Creates doubles for one execution and remembers them for auto-verification."""

    def __init__(self, registry: TypeRegistry | None = None, strict: bool = False):
        self.registry = registry or default_registry
        self.strict = strict
        self.doubles: list[Double] = []

    def instance_double(self, target: str | type) -> Double:
        """Double an instance of `target`, validated against its instance methods."""
        return self._double(target, InstanceReference)

    def class_double(self, target: str | type) -> Double:
        """Double `target` itself, validated against its class-level callables."""
        return self._double(target, ClassReference)

    def _double(self, target: str | type, kind: type[Reference]) -> Double:
        double = Double(self.registry.reference(target, kind, strict=self.strict))
        self.doubles.append(double)
        return double

    def stub(self, double: Double) -> Proxy:
        return Proxy(double, "_stub")

    allow = stub

    def expect(self, double: Double) -> Proxy:
        return Proxy(double, "_expect")

    def verify(self, double: Double) -> Proxy:
        return Proxy(double, "_verify")

    def assert_exhausted(self, double: Double) -> bool:
        """
        Fail unless every expectation registered on `double` was consumed.

        Raises:
            DoubleFailure: Listing the unconsumed expectations
        """
        double._assert_exhausted()
        return True

    def unexhausted(self) -> list[DoubleFailure]:
        """Collect the exhaustion failures of every double created in this session."""
        failures = []
        for double in self.doubles:
            try:
                double._assert_exhausted()
            except DoubleFailure as exc:
                failures.append(exc)
        return failures
