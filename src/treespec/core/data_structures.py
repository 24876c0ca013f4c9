"""
Immutable records shared by the scheduler, the pipeline and notifiers.

These records only contain iteration and creation logic. A `UnitOfWork` is
declared inside a context, flattening the context tree annotates it with its
ancestors (`NestedUnitOfWork`), and the scheduler packages the outcome of an
execution as an `ExecutedUnitOfWork`.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from attrs import field, frozen, validators

from treespec.core.inspection import format_trace
from treespec.core.short_id import default_short_id

if TYPE_CHECKING:
    from treespec.core.context import Context, Example


@frozen
class UnitOfWork:
    """A labeled test body. Indivisible and never mutated after declaration."""

    name: str | None
    body: Callable[["Example"], Any] = field(validator=validators.is_callable())


@frozen
class NestedUnitOfWork:
    """A unit of work annotated with its ancestor contexts, root first."""

    parents: tuple["Context", ...] = field(converter=tuple)
    unit_of_work: UnitOfWork

    @property
    def name(self) -> str | None:
        return self.unit_of_work.name

    @property
    def body(self) -> Callable[["Example"], Any]:
        return self.unit_of_work.body

    @property
    def full_name(self) -> str:
        """Space-joined names of the ancestors and the unit itself, unnamed entries skipped."""
        names = [parent.name for parent in self.parents] + [self.name]
        return " ".join(name for name in names if name)

    @property
    def immediate_parent(self) -> "Context":
        """The context that declared the unit and is responsible for executing it."""
        return self.parents[-1]

    @property
    def short_id(self) -> str:
        return default_short_id(self)

    def nest_under(self, parent: "Context") -> "NestedUnitOfWork":
        """Return a copy with `parent` prepended to the ancestor chain."""
        return NestedUnitOfWork((parent, *self.parents), self.unit_of_work)


@frozen
class Failure:
    """
    A failed expectation reported for a unit of work.

    Params:
        unit_of_work: The nested unit of work that failed
        msg: Failure message, `message` falls back to a default when missing
        trace: Call stack snapshot as `path:line:in function` entries
    """

    unit_of_work: NestedUnitOfWork
    msg: str | None = None
    trace: tuple[str, ...] = field(default=(), converter=tuple)

    @property
    def message(self) -> str:
        return self.msg or "assertion failed"

    @classmethod
    def from_exception(
        cls,
        unit_of_work: NestedUnitOfWork,
        exc: BaseException,
        message: str | None = None,
    ) -> "Failure":
        """
        Build a failure from a caught exception.

        Params:
            unit_of_work: The unit of work being executed
            exc: The caught exception, its traceback becomes the trace
            message: Explicit message, defaults to `str(exc)`

        Returns:
            Failure (or subclass) instance
        """
        if message is None:
            message = str(exc) or None
        return cls(unit_of_work, message, format_trace(exc.__traceback__))


@frozen
class CodeException(Failure):
    """An unexpected exception that leaked out of test code."""

    @property
    def message(self) -> str:
        return self.msg or "exception raised"


@frozen
class ExecutedUnitOfWork:
    """The outcome of executing a nested unit of work."""

    nested_unit_of_work: NestedUnitOfWork
    errors: tuple[Failure, ...] = field(converter=tuple)
    duration: float

    @property
    def name(self) -> str | None:
        return self.nested_unit_of_work.name

    @property
    def full_name(self) -> str:
        return self.nested_unit_of_work.full_name

    @property
    def parents(self) -> tuple["Context", ...]:
        return self.nested_unit_of_work.parents

    @property
    def short_id(self) -> str:
        return self.nested_unit_of_work.short_id

    @property
    def failed(self) -> bool:
        return bool(self.errors)
