"""
Worker pool scheduler.

Units of work are pushed onto a shared queue consumed by a fixed number of
threads, followed by one sentinel per worker. Notifier calls are serialised
through `Synchronized`, but the order in which units finish is not
guaranteed, so notifiers relying on declaration order should not be used
with this scheduler. There is no per-test timeout: a hung body hangs its
worker.
"""

import logging
import queue
import threading
import time
from collections.abc import Callable

from treespec.notifiers.base import Synchronized
from treespec.schedulers.base import Scheduler

logger = logging.getLogger(__name__)

_SENTINEL = object()


class Threaded(Scheduler):
    """
    Runs units of work on a pool of threads.

    Params:
        workers: Number of worker threads
        clock: Monotonic clock returning seconds
    """

    def __init__(self, workers: int = 4, clock: Callable[[], float] = time.perf_counter):
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        super().__init__(clock)
        self.workers = workers

    def _run(self, context, config) -> bool:
        notifier = Synchronized(config.notifier)
        notifier.run_start(config)

        work: queue.Queue = queue.Queue()
        fatal: list[BaseException] = []

        def worker() -> None:
            while True:
                item = work.get()
                if item is _SENTINEL:
                    return
                if fatal:
                    continue
                try:
                    self.evaluate(item, notifier)
                except BaseException as exc:
                    logger.debug("Worker %s stopping on %r", threading.current_thread().name, exc)
                    fatal.append(exc)

        threads = [
            threading.Thread(target=worker, name=f"treespec-worker-{i}", daemon=True)
            for i in range(self.workers)
        ]
        for thread in threads:
            thread.start()

        for nested_unit_of_work in context.flatten():
            work.put(nested_unit_of_work)
        for _ in threads:
            work.put(_SENTINEL)

        for thread in threads:
            thread.join()

        if fatal:
            raise fatal[0]
        return notifier.run_finish()
