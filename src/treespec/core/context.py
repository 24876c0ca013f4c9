"""
Context tree and per-execution instances.

A `Context` is a node in the declaration tree. It owns child contexts, units
of work and named helpers, and records which pipeline executes its tests.
Helpers and pipelines are inherited: lookups walk the parent pointers and the
closest definition wins.

Contexts are built once and treated as read-only during a run. Per-execution
state (memoized helpers, doubles, capabilities installed by pipeline layers)
lives on an `Example`, a fresh instance of which is created for every unit of
work that is executed.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from types import MethodType
from typing import TYPE_CHECKING, Any, Optional

from attrs import frozen

from treespec.core.data_structures import Failure, NestedUnitOfWork, UnitOfWork
from treespec.core.declarations import DSL

if TYPE_CHECKING:
    from treespec.evaluators.pipeline import Pipeline

logger = logging.getLogger(__name__)


@frozen
class Memoized:
    """A lazily computed helper, cached per execution."""

    name: str
    compute: Callable[["Example"], Any]

    def bind(self, example: "Example") -> Any:
        return example._memoize(self.name, self.compute)


@frozen
class HelperMethod:
    """A plain helper method receiving the execution instance as first argument."""

    name: str
    fn: Callable[..., Any]

    def bind(self, example: "Example") -> Callable[..., Any]:
        return MethodType(self.fn, example)


Helper = Memoized | HelperMethod


class Example:
    """
    The instance a test body runs against.

    Attribute lookup resolves helpers declared along the context chain first
    (closest definition wins), then capabilities installed by the pipeline
    layers, such as `assert_equal` or `instance_double`. Every public name is
    left to helpers and capabilities; the methods layers call are underscored.
    """

    def __init__(self, context: "Context", pipeline: Optional["Pipeline"] = None):
        self._context = context
        self._memo: dict[str, Any] = {}
        self._capabilities: dict[str, Any] = {}
        self._layer_state: dict[int, Any] = {}
        if pipeline is not None:
            pipeline.install(self)

    def _provide(self, name: str, capability: Any) -> None:
        """
        Make a capability available to the test body.

        Params:
            name: Attribute name the body uses to reach the capability
            capability: Any object, usually a function
        """
        self._capabilities[name] = capability

    def _attach(self, owner: object, state: Any) -> None:
        """Store per-execution state on behalf of a pipeline layer."""
        self._layer_state[id(owner)] = state

    def _attached(self, owner: object) -> Any:
        """Return state previously stored by `_attach`, or None."""
        return self._layer_state.get(id(owner))

    def _memoize(self, name: str, compute: Callable[["Example"], Any]) -> Any:
        if name not in self._memo:
            self._memo[name] = compute(self)
        return self._memo[name]

    def __getattr__(self, name: str) -> Any:
        # Private and dunder names never resolve to helpers
        if name.startswith("_"):
            raise AttributeError(name)
        helper = self._context.lookup_helper(name)
        if helper is not None:
            return helper.bind(self)
        if name in self._capabilities:
            return self._capabilities[name]
        raise AttributeError(
            f"'{name}' is not a helper of context {self._context.describe_path()!r} "
            f"nor a capability of its pipeline"
        )


@dataclass(eq=False)
class Context(DSL):
    """
    Node in the declaration tree.

    Params:
        name: Optional context name, used in full names and reports
        parent: Enclosing context used for helper and pipeline lookups, None for roots
        pipeline: Pipeline override, inherited from the parent when None
    """

    name: str | None = None
    parent: Optional["Context"] = field(default=None, repr=False)
    pipeline: Optional["Pipeline"] = field(default=None, repr=False)
    children: list["Context"] = field(default_factory=list, repr=False)
    units_of_work: list[UnitOfWork] = field(default_factory=list, repr=False)
    helpers: dict[str, Helper] = field(default_factory=dict, repr=False)

    @classmethod
    def make_root(cls, pipeline: Optional["Pipeline"] = None) -> "Context":
        """Build an unnamed root context owning `pipeline`."""
        return cls(name=None, pipeline=pipeline)

    def _declaration_context(self) -> "Context":
        return self

    def add_child(
        self,
        name: str | None,
        build_fn: Callable[["Context"], Any],
        pipeline: Optional["Pipeline"] = None,
    ) -> "Context":
        """
        Create, populate and append a child context.

        Params:
            name: Child name, None for an anonymous grouping
            build_fn: Function called with the child to declare its contents
            pipeline: Optional pipeline override for the child subtree

        Returns:
            The new child context
        """
        child = Context(name=name, parent=self, pipeline=pipeline)
        build_fn(child)
        self.children.append(child)
        return child

    def add_test(self, name: str | None, body: Callable[["Example"], Any]) -> UnitOfWork:
        """Append a unit of work to this context."""
        unit = UnitOfWork(name, body)
        self.units_of_work.append(unit)
        return unit

    def add_memoized(self, name: str, compute: Callable[["Example"], Any]) -> None:
        """Register a lazily computed helper, replacing any same-named helper here."""
        self.helpers[name] = Memoized(name, compute)

    def add_helper(self, name: str, fn: Callable[..., Any]) -> None:
        """Register a helper method, replacing any same-named helper here."""
        self.helpers[name] = HelperMethod(name, fn)

    def lookup_helper(self, name: str) -> Helper | None:
        """
        Find the closest helper definition for `name`.

        Params:
            name: Helper name

        Returns:
            The helper declared on this context or the nearest ancestor, or None
        """
        context: Context | None = self
        while context is not None:
            if name in context.helpers:
                return context.helpers[name]
            context = context.parent
        return None

    @property
    def effective_pipeline(self) -> Optional["Pipeline"]:
        """The pipeline declared on this context or the nearest ancestor."""
        context: Context | None = self
        while context is not None:
            if context.pipeline is not None:
                return context.pipeline
            context = context.parent
        return None

    def flatten(self) -> Iterator[NestedUnitOfWork]:
        """
        Lazily yield every unit of work in the subtree, annotated with its ancestors.

        Children are walked first, in declaration order, followed by this
        context's own units. Every call re-walks the tree.
        """
        for child in self.children:
            for nested in child.flatten():
                yield nested.nest_under(self)
        for unit in self.units_of_work:
            yield NestedUnitOfWork((self,), unit)

    nested_units_of_work = flatten

    def create_detached(
        self, build_fn: Callable[["Context"], Any], name: str | None = None
    ) -> "Context":
        """
        Build a context that is not linked into any tree.

        Detached contexts hold reusable groups of tests that are copied into
        a tree with `splice`.
        """
        detached = Context(name=name)
        build_fn(detached)
        return detached

    def splice(self, source: "Context") -> "Context":
        """
        Copy the units of work directly owned by `source` into a new child.

        Only the direct tests are copied. Nested children and helpers of
        `source` are not, so spliced tests resolve helpers through this
        context. Every call creates an independent child.

        Params:
            source: Usually a context built by `create_detached`

        Returns:
            The new child context
        """
        child = Context(name=source.name, parent=self)
        child.units_of_work.extend(
            UnitOfWork(unit.name, unit.body) for unit in source.units_of_work
        )
        if source.children or source.helpers:
            logger.debug(
                "Splicing %r copies %d tests only, skipping %d children and %d helpers",
                source.name,
                len(source.units_of_work),
                len(source.children),
                len(source.helpers),
            )
        self.children.append(child)
        return child

    def execute(self, nested_unit_of_work: NestedUnitOfWork) -> list[Failure]:
        """
        Run a unit of work declared on this context.

        A fresh `Example` is created for every call so memoized helpers never
        leak between executions.

        Params:
            nested_unit_of_work: The unit to run, normally one whose immediate parent is self

        Returns:
            List of failures, empty when the unit passed
        """
        pipeline = self.effective_pipeline
        if pipeline is None:
            from treespec.evaluators import DEFAULT_PIPELINE

            pipeline = DEFAULT_PIPELINE
        example = Example(self, pipeline)
        return pipeline.execute(nested_unit_of_work, example)

    def describe_path(self) -> str:
        """Space-joined names from the root to this context."""
        names = []
        context: Context | None = self
        while context is not None:
            if context.name:
                names.append(context.name)
            context = context.parent
        return " ".join(reversed(names))
