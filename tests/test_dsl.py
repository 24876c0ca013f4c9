"""
Tests for Spec and the module-level DSL.

Focus Areas:
1. Running declared trees end to end
2. Independent configuration per spec
3. Default spec used by module-level functions
"""

import threading

import treespec
from treespec.config import RunConfig
from treespec.dsl import Spec, default_spec, dsl, reset_default_spec
from treespec.evaluators import Doubles, Expectations, Simple, stack
from treespec.notifiers import Null
from treespec.schedulers import Filter, Threaded


class TestSpec:
    """Tests for running specs."""

    def test_run_passing(self, spec, recording_notifier):
        """A spec of passing tests succeeds."""

        @spec.describe("math")
        def math(ctx):
            ctx.let("two", lambda t: 2)
            ctx.it("adds", lambda t: t.assert_equal(4, t.two + t.two))

        assert spec.run() is True
        assert recording_notifier.full_names == ["math adds"]

    def test_run_failing(self, spec, recording_notifier):
        """Any failure fails the run."""
        spec.it("passes", lambda t: None)
        spec.it("fails", lambda t: t.assert_equal(1, 2))

        assert spec.run() is False
        assert recording_notifier.messages == ["want: 1\ngot: 2"]

    def test_run_overrides(self, spec, recording_notifier):
        """Overrides apply to a single run."""
        spec.it("kept", lambda t: None)
        spec.it("dropped", lambda t: None)

        spec.run(scheduler=Filter.by_name("kept"))
        assert recording_notifier.full_names == ["kept"]

    def test_pipeline_from_config(self, recording_notifier):
        """The configured pipeline executes the spec's tests."""
        spec = Spec(notifier=recording_notifier, pipeline=stack(Expectations.unittest()))
        spec.it("unittest style", lambda t: t.assertEqual(1, 1))
        assert spec.run() is True

    def test_pipeline_override_per_run(self, spec, recording_notifier):
        """A pipeline passed to run replaces the configured one for that run."""
        spec.it("unittest style", lambda t: t.assertEqual(1, 1))
        assert spec.run(assertion_context=stack(Simple(), Expectations.unittest())) is True

    def test_spec_options_are_independent(self):
        """Specs built with dsl() do not share trees or configuration."""
        first = dsl(notifier=Null())
        second = dsl(notifier=Null(), scheduler=Threaded())
        first.it("only in first", lambda t: None)

        assert not first.is_empty
        assert second.is_empty
        assert isinstance(second.config.scheduler, Threaded)

    def test_from_config(self, recording_notifier):
        """A base configuration can be reused and extended."""
        base = RunConfig(notifier=recording_notifier)
        spec = Spec(base, pipeline=stack(Simple(), Doubles.with_options("auto_verify")))
        assert spec.config.notifier is recording_notifier
        assert spec.root.pipeline is spec.config.pipeline

    def test_shared_context_scenario(self, spec, recording_notifier):
        """Shared tests run against the helpers of every including context."""
        positive_number = spec.shared_context(
            lambda ctx: ctx.it("is positive", lambda t: t.assert_(t.number > 0))
        )

        def one(ctx):
            ctx.let("number", lambda t: 1)
            ctx.include_context(positive_number)

        def two(ctx):
            ctx.let("number", lambda t: 2)
            ctx.include_context(positive_number)

        spec.describe("one", one)
        spec.describe("two", two)

        assert spec.run() is True
        assert recording_notifier.full_names == ["one is positive", "two is positive"]

    def test_doubles_scenario(self, spec, recording_notifier):
        """Doubles are available through the default pipeline."""

        def body(t):
            repo = t.instance_double("Repo")
            t.stub(repo).find(1).and_return("one")
            t.assert_equal("one", repo.find(1))
            t.assert_equal(None, repo.find(2))

        spec.it("stubs", body)
        assert spec.run() is True

    def test_spec_runs_another_spec(self, spec, recording_notifier):
        """A test body can build and run an independent spec."""

        def body(t):
            inner = Spec(notifier=Null())
            inner.it("inner", lambda t: t.assert_equal(2, 1 + 1))
            t.assert_(inner.run(), "inner spec failed")

        spec.it("runs another spec", body)

        assert spec.run() is True
        assert recording_notifier.messages == []

    def test_specs_run_concurrently(self):
        """Independent specs can run at the same time on different threads."""
        started = threading.Event()
        release = threading.Event()
        results = []

        slow = Spec(notifier=Null())
        slow.it("waits", lambda t: (started.set(), t.assert_(release.wait(5))))
        fast = Spec(notifier=Null())
        fast.it("passes", lambda t: None)

        worker = threading.Thread(target=lambda: results.append(slow.run()))
        worker.start()
        try:
            assert started.wait(5)
            assert fast.run() is True
        finally:
            release.set()
            worker.join(5)

        assert results == [True]


class TestDefaultSpec:
    """Tests for the module-level functions."""

    def test_module_functions_declare_on_default_spec(self):
        """describe and it at module level go to the default spec."""
        treespec.describe("top", lambda ctx: ctx.it("works", lambda t: None))
        assert [unit.full_name for unit in default_spec().root.flatten()] == ["top works"]

    def test_run_uses_default_spec(self, recording_notifier):
        """run() executes the default spec."""
        treespec.it("passes", lambda t: None)
        assert treespec.run(notifier=recording_notifier) is True
        assert recording_notifier.full_names == ["passes"]

    def test_module_level_helpers(self, recording_notifier):
        """let and helper at module level apply to every test."""
        treespec.let("base", lambda t: 10)
        treespec.helper("plus", lambda t, n: t.base + n)
        treespec.it("adds", lambda t: t.assert_equal(11, t.plus(1)))
        assert treespec.run(notifier=recording_notifier) is True

    def test_reset(self):
        """Resetting starts a fresh default spec."""
        first = default_spec()
        assert reset_default_spec() is first
        assert default_spec() is not first
