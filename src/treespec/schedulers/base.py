"""
Scheduler base class and run state machine.

A scheduler walks the flattened units of work of a context tree, times each
execution, packages the outcome as an `ExecutedUnitOfWork` and reports it to
the notifier of the run configuration. The verdict of the run is whatever
the notifier's `run_finish` returns.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from enum import Enum
from typing import Any, Protocol

from treespec.core.data_structures import ExecutedUnitOfWork, NestedUnitOfWork
from treespec.exceptions import SchedulerStateError

logger = logging.getLogger(__name__)


class RunState(Enum):
    NOT_STARTED = "not started"
    RUNNING = "running"
    FINISHED = "finished"


class Flattenable(Protocol):
    def flatten(self) -> Iterator[NestedUnitOfWork]: ...


class Scheduler(ABC):
    """
    Base class for schedulers.

    Params:
        clock: Monotonic clock returning seconds, used to time executions
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self.clock = clock
        self.state = RunState.NOT_STARTED
        self._state_lock = threading.Lock()

    def run(self, context: Flattenable, config: Any) -> bool:
        """
        Execute every unit of work of `context` and report to `config.notifier`.

        Params:
            context: Context tree (or filtered view of one) to run
            config: Run configuration providing at least `notifier`

        Returns:
            The notifier's verdict, True when the run passed

        Raises:
            SchedulerStateError: If this scheduler is already running
        """
        with self._state_lock:
            if self.state is RunState.RUNNING:
                raise SchedulerStateError(type(self).__name__, self.state.value)
            self.state = RunState.RUNNING

        logger.debug("%s run starting", type(self).__name__)
        try:
            result = self._run(context, config)
        finally:
            self.state = RunState.FINISHED
        logger.debug("%s run finished, passed=%s", type(self).__name__, result)
        return result

    @abstractmethod
    def _run(self, context: Flattenable, config: Any) -> bool:
        pass

    def evaluate(self, nested_unit_of_work: NestedUnitOfWork, notifier: Any) -> ExecutedUnitOfWork:
        """Time and execute a single unit of work, bracketed by notifier callbacks."""
        notifier.evaluate_start(nested_unit_of_work)

        start = self.clock()
        errors = nested_unit_of_work.immediate_parent.execute(nested_unit_of_work)
        finish = self.clock()

        executed = ExecutedUnitOfWork(nested_unit_of_work, errors, finish - start)
        notifier.evaluate_finish(executed)
        return executed
