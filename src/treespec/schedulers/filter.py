"""Scheduler wrapper that restricts a run to matching units of work."""

import re
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from treespec.core.data_structures import NestedUnitOfWork
from treespec.core.short_id import default_short_id
from treespec.schedulers.base import Flattenable, Scheduler
from treespec.schedulers.serial import Serial

Predicate = Callable[[NestedUnitOfWork], bool]


class FilteredContext:
    """View of a context whose flattened sequence only keeps units matching `predicate`."""

    def __init__(self, context: Flattenable, predicate: Predicate):
        self.context = context
        self.predicate = predicate

    def flatten(self) -> Iterator[NestedUnitOfWork]:
        return (unit for unit in self.context.flatten() if self.predicate(unit))

    def __getattr__(self, name: str) -> Any:
        return getattr(self.context, name)


class Filter(Scheduler):
    """
    Delegates to another scheduler with a filtered view of the context.

    Filtering happens before delegation, so timing and notifiers only ever
    observe the selected units.

    Params:
        scheduler: Scheduler doing the actual work, `Serial` when None
        predicate: Selects the units of work to run
    """

    def __init__(self, scheduler: Scheduler | None, predicate: Predicate):
        super().__init__()
        self.scheduler = scheduler or Serial()
        self.predicate = predicate

    @classmethod
    def by_name(cls, pattern: str, scheduler: Scheduler | None = None) -> "Filter":
        """Keep units whose full name matches the regular expression `pattern`."""
        regex = re.compile(pattern)
        return cls(scheduler, lambda unit: regex.search(unit.full_name) is not None)

    @classmethod
    def by_short_ids(
        cls,
        ids: Iterable[str],
        short_id: Callable[[NestedUnitOfWork], str] = default_short_id,
        scheduler: Scheduler | None = None,
    ) -> "Filter":
        """Keep units whose short id is one of `ids`."""
        wanted = frozenset(ids)
        return cls(scheduler, lambda unit: short_id(unit) in wanted)

    def _run(self, context, config) -> bool:
        return self.scheduler.run(FilteredContext(context, self.predicate), config)
