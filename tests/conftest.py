"""
Shared test fixtures and utilities for the treespec test suite.
"""

import pytest

from treespec.core import CodeException, Context, ExecutedUnitOfWork, Failure, NestedUnitOfWork, UnitOfWork
from treespec.dsl import Spec, reset_default_spec
from treespec.notifiers import Notifier


class RecordingNotifier(Notifier):
    """Notifier remembering every callback it receives."""

    def __init__(self):
        self.started_with = None
        self.starts: list[NestedUnitOfWork] = []
        self.results: list[ExecutedUnitOfWork] = []
        self.finished = False

    def run_start(self, config=None):
        self.started_with = config

    def evaluate_start(self, nested_unit_of_work):
        self.starts.append(nested_unit_of_work)

    def evaluate_finish(self, executed):
        self.results.append(executed)

    def run_finish(self):
        self.finished = True
        return not any(result.failed for result in self.results)

    @property
    def full_names(self) -> list[str]:
        return [result.full_name for result in self.results]

    @property
    def messages(self) -> list[str]:
        return [error.message for result in self.results for error in result.errors]


@pytest.fixture
def recording_notifier():
    """Fresh notifier recording results instead of printing them."""
    return RecordingNotifier()


@pytest.fixture
def spec(recording_notifier):
    """Spec wired to the recording notifier.

    Usage:
        def test_something(spec, recording_notifier):
            spec.it("passes", lambda t: t.assert_(True))
            assert spec.run()
    """
    return Spec(notifier=recording_notifier)


@pytest.fixture(autouse=True)
def fresh_default_spec():
    """Keep declarations on the module-level default spec from leaking between tests."""
    reset_default_spec()
    yield
    reset_default_spec()


@pytest.fixture
def make_nested():
    """Factory for nested units of work under contexts with the given names."""

    def factory(parent_names=(), name=None):
        parents = [Context(name=parent_name) for parent_name in parent_names]
        return NestedUnitOfWork(parents, UnitOfWork(name, lambda t: None))

    return factory


@pytest.fixture
def make_executed(make_nested):
    """Factory for executed units of work, passing in 1ms by default."""

    def factory(parents=(), errors=(), duration=0.001, name=None):
        return ExecutedUnitOfWork(make_nested(parents, name), errors, duration)

    return factory


@pytest.fixture
def make_failure(make_nested):
    """Factory for assertion failures (or code exceptions with `code=True`)."""

    def factory(message="failed", trace=(), code=False, parents=(), name="failure"):
        kind = CodeException if code else Failure
        return kind(make_nested(parents, name), message, trace)

    return factory
