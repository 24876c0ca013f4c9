"""
Built-in output notifiers.

Notifiers write to the stream given at construction, standard output by
default. They keep per-run state, so build a fresh instance for every run.
"""

import math
import os
import sys
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.text import Text

from treespec.core.data_structures import CodeException, ExecutedUnitOfWork, Failure
from treespec.notifiers.base import Notifier, ShortIdSupport

# Trace entries from inside the framework are not useful when debugging tests
LIB_DIR = str(Path(__file__).resolve().parent.parent)

DEFAULT_SPLITS = (0.001, 0.005, 0.01, 0.1, 1.0, math.inf)


class Character(Notifier):
    """Prints `.` for a pass, `F` for a failure and `E` for a code exception."""

    def __init__(self, out: TextIO | None = None):
        self.out = out or sys.stdout
        self.failed = False

    def evaluate_finish(self, executed: ExecutedUnitOfWork) -> None:
        self.out.write(self.label_for(executed.errors[0] if executed.errors else None))
        self.failed = self.failed or executed.failed

    def run_finish(self) -> bool:
        self.out.write("\n")
        return not self.failed

    @staticmethod
    def label_for(failure: Failure | None) -> str:
        if isinstance(failure, CodeException):
            return "E"
        if isinstance(failure, Failure):
            return "F"
        return "."


class Documentation(ShortIdSupport, Notifier):
    """
    Prints context headers and one line per test.

    Contexts are indented two spaces per level and only printed when they
    change. Each test line reads `<duration>s <short id> <name>`, with
    ` - FAILED` appended to the names of failed tests.
    """

    indent = 2
    passed_style = "green"
    failed_style = "red"

    def __init__(self, out: TextIO | None = None):
        self.out = out or sys.stdout
        self.last_seen_names: list[str] = []
        self.failed = False

    def evaluate_finish(self, executed: ExecutedUnitOfWork) -> None:
        self._output_context_header([parent.name for parent in executed.parents if parent.name])
        self.failed = self.failed or executed.failed

        line = Text(" " * (len(self.last_seen_names) * self.indent))
        line.append_text(self.decorate(executed))
        self.emit(line)

    def run_finish(self) -> bool:
        self.emit(Text())
        return not self.failed

    def decorate(self, executed: ExecutedUnitOfWork) -> Text:
        if executed.failed:
            name = Text(self.append_failed(executed.name), style=self.failed_style)
        else:
            name = Text(executed.name or "", style=self.passed_style)
        return Text.assemble(
            f"{executed.duration:.3f}s {self.short_id_for(executed)} ", name
        )

    @staticmethod
    def append_failed(name: str | None) -> str:
        return " - ".join(part for part in (name, "FAILED") if part is not None)

    def emit(self, text: Text) -> None:
        self.out.write(text.plain + "\n")

    def _output_context_header(self, parent_names: list[str]) -> None:
        if parent_names == self.last_seen_names:
            return

        common = 0
        for seen, name in zip(self.last_seen_names, parent_names):
            if seen != name:
                break
            common += 1

        self.emit(Text())
        for depth, name in enumerate(parent_names[common:], start=common):
            self.emit(Text(" " * (depth * self.indent) + name))
        self.last_seen_names = parent_names


class ColoredDocumentation(Documentation):
    """`Documentation` with passing tests in green and failing ones in red."""

    def __init__(self, out: TextIO | None = None):
        super().__init__(out)
        self.console = Console(
            file=self.out,
            force_terminal=True,
            color_system="standard",
            highlight=False,
            markup=False,
            emoji=False,
            soft_wrap=True,
        )

    def emit(self, text: Text) -> None:
        self.console.print(text)


class FailuresAtEnd(ShortIdSupport, Notifier):
    """
    Collects failures and prints them once the run is over.

    Each failure is reported with its short id, full name, indented message
    and the trace entries that point outside the framework.
    """

    def __init__(self, out: TextIO | None = None):
        self.out = out or sys.stdout
        self.errors: list[Failure] = []

    def evaluate_finish(self, executed: ExecutedUnitOfWork) -> None:
        self.errors.extend(executed.errors)

    def run_finish(self) -> bool:
        if not self.errors:
            return True

        self.out.write("\n")
        for error in self.errors:
            message = "".join(
                f"  {line}" for line in error.message.splitlines(keepends=True)
            )
            self.out.write(
                f"{self.short_id_for(error.unit_of_work)} - "
                f"{error.unit_of_work.full_name}\n{message}\n\n"
            )
            for entry in self.clean_trace(error.trace):
                self.out.write(f"  {entry}\n")
            self.out.write("\n")
        return False

    @staticmethod
    def clean_trace(trace: tuple[str, ...]) -> list[str]:
        return [entry for entry in trace if not os.path.dirname(entry).startswith(LIB_DIR)]


class TimingsAtEnd(Notifier):
    """
    Prints a histogram of test durations once the run is over.

    Params:
        out: Output stream
        splits: Ascending bucket upper bounds, the last one usually infinite
        width: Width of the longest bar
    """

    def __init__(
        self,
        out: TextIO | None = None,
        splits: tuple[float, ...] = DEFAULT_SPLITS,
        width: int = 20,
    ):
        self.out = out or sys.stdout
        self.splits = tuple(splits)
        self.width = width
        self.timings: list[float] = []

    def evaluate_finish(self, executed: ExecutedUnitOfWork) -> None:
        self.timings.append(executed.duration)

    def buckets(self) -> dict[float, int]:
        """Count durations per split, dropping empty buckets at the slow end."""
        buckets = {split: 0 for split in self.splits}
        for duration in self.timings:
            split = next((x for x in self.splits if duration < x), self.splits[-1])
            buckets[split] += 1

        items = list(buckets.items())
        while items and items[-1][1] == 0:
            items.pop()
        return dict(items)

    def run_finish(self) -> bool:
        buckets = self.buckets()
        largest = max(buckets.values(), default=0)

        self.out.write("           Timings:\n")
        for split, count in buckets.items():
            label = "∞" if math.isinf(split) else str(split)
            bar = "#" * math.ceil(count / largest * self.width) if largest else ""
            self.out.write(f"    {label:>6} {bar:<{self.width}} {count}\n")
        self.out.write("\n")
        return True


def default_notifier() -> Notifier:
    """Colored documentation, then the timing histogram, then failure details."""
    return ColoredDocumentation() + TimingsAtEnd() + FailuresAtEnd()
