"""
Declaration DSL shared by contexts and specs.

The method names are modeled after rspec (`describe`, `it`, `let`) and
delegate to the structural operations of the current context. Every
declaration accepts either an explicit callable or works as a decorator:

    @spec.describe("calculation")
    def calculation(ctx):
        ctx.let("input", lambda t: 3)

        @ctx.it("can multiply")
        def _(t):
            t.assert_equal(9, t.input * t.input)
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from treespec.core.context import Context
    from treespec.evaluators.pipeline import Pipeline


def _split_name(name_or_fn: Any, fn: Callable | None) -> tuple[str | None, Callable | None]:
    """Accept `(name, fn)`, `(fn,)` or `(SomeClass, fn)` argument shapes."""
    if callable(name_or_fn) and not isinstance(name_or_fn, type) and fn is None:
        return None, name_or_fn
    if isinstance(name_or_fn, type):
        return name_or_fn.__name__, fn
    return name_or_fn, fn


class DSL(ABC):
    """Declaration methods, delegating to `_declaration_context()`."""

    @abstractmethod
    def _declaration_context(self) -> "Context":
        pass

    def describe(
        self,
        name: Any = None,
        build: Callable[["Context"], Any] | None = None,
        *,
        pipeline: "Pipeline | None" = None,
    ):
        """
        Declare a nested context.

        Params:
            name: Context name, a class (its name is used), or the build function
            build: Function populating the new context, omit to use as decorator
            pipeline: Optional pipeline override for the new context and its descendants

        Returns:
            The new `Context`, or a decorator when `build` is omitted
        """
        name, build = _split_name(name, build)
        if build is None:
            return lambda fn: self._declaration_context().add_child(name, fn, pipeline=pipeline)
        return self._declaration_context().add_child(name, build, pipeline=pipeline)

    def it(self, name: Any = None, body: Callable | None = None):
        """
        Declare a unit of work.

        Params:
            name: Test name, or the body for an unnamed test
            body: Test body receiving the execution instance, omit to use as decorator

        Returns:
            The declared `UnitOfWork`, or a decorator when `body` is omitted
        """
        name, body = _split_name(name, body)
        if body is None:
            return lambda fn: self._declaration_context().add_test(name, fn)
        return self._declaration_context().add_test(name, body)

    def let(self, name: Any, compute: Callable | None = None):
        """Declare a memoized helper. The decorated function's name is used when no name is given."""
        name, compute = _split_name(name, compute)
        if compute is None:
            return lambda fn: self.let(name or fn.__name__, fn)
        self._declaration_context().add_memoized(name or compute.__name__, compute)
        return compute

    def helper(self, name: Any, fn: Callable | None = None):
        """Declare a helper method, called as `example.name(*args)`."""
        name, fn = _split_name(name, fn)
        if fn is None:
            return lambda inner: self.helper(name or inner.__name__, inner)
        self._declaration_context().add_helper(name or fn.__name__, fn)
        return fn

    def shared_context(self, build: Callable[["Context"], Any], name: str | None = None) -> "Context":
        """Build a detached, reusable group of tests."""
        return self._declaration_context().create_detached(build, name=name)

    def include_context(self, shared: "Context") -> "Context":
        """Copy the tests of a shared context into the current context."""
        return self._declaration_context().splice(shared)
