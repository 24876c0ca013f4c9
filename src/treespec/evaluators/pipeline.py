"""
Composable execution pipeline.

A pipeline turns a unit of work into a list of failures. It is an ordered
composition of evaluator layers sandwiched between `Bottom`, which runs the
body, and `Top`, which converts any exception still escaping into a
`CodeException`. Each layer wraps the next inner one, much like WSGI
middleware: it calls `call_next`, translates the failure conditions it
recognises and lets everything else propagate outwards.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING

from treespec.core.data_structures import CodeException, Failure, NestedUnitOfWork

if TYPE_CHECKING:
    from treespec.core.context import Example

logger = logging.getLogger(__name__)

CallNext = Callable[[NestedUnitOfWork, "Example"], list[Failure]]

# Environment exhaustion is not a test failure and must end the run
FATAL_EXCEPTIONS: tuple[type[BaseException], ...] = (MemoryError,)


class Evaluator(ABC):
    """Base class for pipeline layers."""

    def install(self, example: "Example") -> None:
        """Add this layer's capabilities to a fresh execution instance."""
        pass

    @abstractmethod
    def execute(
        self,
        unit_of_work: NestedUnitOfWork,
        example: "Example",
        call_next: CallNext | None,
    ) -> list[Failure]:
        """
        Execute the unit of work, delegating to `call_next` for inner layers.

        Params:
            unit_of_work: The unit being executed
            example: Per-execution instance the body runs against
            call_next: The composed inner layers, None for the bottom layer

        Returns:
            List of failures, empty on success
        """
        pass


class Bottom(Evaluator):
    """Runs the body with no error handling."""

    def execute(self, unit_of_work, example, call_next=None) -> list[Failure]:
        unit_of_work.body(example)
        return []


class Top(Evaluator):
    """Catch-all making sure no standard exception leaks out of the pipeline."""

    def execute(self, unit_of_work, example, call_next) -> list[Failure]:
        try:
            return call_next(unit_of_work, example)
        except FATAL_EXCEPTIONS:
            raise
        except Exception as exc:
            logger.debug(
                "Code exception in %r: %s", unit_of_work.full_name, type(exc).__name__
            )
            message = str(exc) or type(exc).__name__
            return [CodeException.from_exception(unit_of_work, exc, message)]


class Pipeline:
    """
    Ordered composition of evaluator layers.

    Params:
        layers: Layers from innermost to outermost, `Bottom` and `Top` are added around them
        bottom: Replacement for the default `Bottom`
        top: Replacement for the default `Top`
    """

    def __init__(
        self,
        layers: list[Evaluator] | tuple[Evaluator, ...] = (),
        bottom: Evaluator | None = None,
        top: Evaluator | None = None,
    ):
        self.layers = tuple(layers)
        self.bottom = bottom or Bottom()
        self.top = top or Top()

    @property
    def evaluators(self) -> tuple[Evaluator, ...]:
        """All layers, innermost first."""
        return (self.bottom, *self.layers, self.top)

    def with_layers(self, *layers: Evaluator) -> "Pipeline":
        """Return a copy with `layers` added outside the existing ones (still inside `Top`)."""
        return Pipeline((*self.layers, *layers), bottom=self.bottom, top=self.top)

    def install(self, example: "Example") -> None:
        # Outer layers install last and win on name clashes
        for evaluator in self.evaluators:
            evaluator.install(example)

    def compose(self) -> CallNext:
        """Wrap every layer around the next inner one."""
        call: CallNext = partial(self.bottom.execute, call_next=None)
        for evaluator in (*self.layers, self.top):
            call = partial(evaluator.execute, call_next=call)
        return call

    def execute(self, unit_of_work: NestedUnitOfWork, example: "Example") -> list[Failure]:
        """
        Run a unit of work through the whole stack.

        Params:
            unit_of_work: The unit to execute
            example: Execution instance, already holding installed capabilities

        Returns:
            List of failures, empty when the unit passed
        """
        return list(self.compose()(unit_of_work, example))

    def __repr__(self) -> str:
        names = ", ".join(type(evaluator).__name__ for evaluator in self.evaluators)
        return f"Pipeline({names})"


def stack(*layers: Evaluator) -> Pipeline:
    """Build a pipeline sandwiching `layers` (innermost first) between `Bottom` and `Top`."""
    return Pipeline(layers)
