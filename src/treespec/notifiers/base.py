"""
Notifier contract and combinators.

A notifier observes a run through four callbacks: `run_start(config)` and
`run_finish()` once per run, `evaluate_start(nested_unit_of_work)` and
`evaluate_finish(executed_unit_of_work)` once per unit of work. The value
returned by `run_finish` is the verdict of the whole run.
"""

import threading
from collections.abc import Callable
from typing import Any

from treespec.core.data_structures import ExecutedUnitOfWork, NestedUnitOfWork
from treespec.core.short_id import default_short_id


class Notifier:
    """
    Base notifier with no-op callbacks.

    Subclasses override the callbacks they care about. Notifiers combine
    with `+`, which produces a `Composite`.
    """

    def run_start(self, config: Any = None) -> None:
        pass

    def evaluate_start(self, nested_unit_of_work: NestedUnitOfWork) -> None:
        pass

    def evaluate_finish(self, executed: ExecutedUnitOfWork) -> None:
        pass

    def run_finish(self) -> bool:
        return True

    def __add__(self, other: "Notifier") -> "Composite":
        return Composite(self, other)


class Composite(Notifier):
    """Fans every callback out to its children, in order, and ANDs their verdicts."""

    def __init__(self, *notifiers: Notifier):
        self.notifiers = list(notifiers)

    def run_start(self, config=None) -> None:
        for notifier in self.notifiers:
            notifier.run_start(config)

    def evaluate_start(self, nested_unit_of_work) -> None:
        for notifier in self.notifiers:
            notifier.evaluate_start(nested_unit_of_work)

    def evaluate_finish(self, executed) -> None:
        for notifier in self.notifiers:
            notifier.evaluate_finish(executed)

    def run_finish(self) -> bool:
        # Every child gets to report, even after a false verdict
        results = [notifier.run_finish() for notifier in self.notifiers]
        return all(results)


class Null(Notifier):
    """Does nothing and always succeeds."""


class Synchronized(Notifier):
    """
    Serialises every call to a wrapped notifier under a single lock.

    Used by the threaded scheduler so notifier implementations need not be
    thread-safe themselves.
    """

    def __init__(self, notifier: Notifier):
        self.notifier = notifier
        self._lock = threading.Lock()

    def run_start(self, config=None) -> None:
        with self._lock:
            self.notifier.run_start(config)

    def evaluate_start(self, nested_unit_of_work) -> None:
        with self._lock:
            self.notifier.evaluate_start(nested_unit_of_work)

    def evaluate_finish(self, executed) -> None:
        with self._lock:
            self.notifier.evaluate_finish(executed)

    def run_finish(self) -> bool:
        with self._lock:
            return self.notifier.run_finish()


class ShortIdSupport:
    """Mixin remembering the short id function of the run configuration."""

    _short_id: Callable[[Any], str] = staticmethod(default_short_id)

    def run_start(self, config=None) -> None:
        super().run_start(config)
        short_id = getattr(config, "short_id", None)
        if short_id is not None:
            self._short_id = short_id

    def short_id_for(self, unit_of_work: Any) -> str:
        return self._short_id(unit_of_work)
