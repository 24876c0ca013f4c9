"""
Entry points for declaring and running tests.

Each `Spec` owns an independent root context and run configuration, so
different specs can use different pipelines, schedulers or notifiers:

    from treespec.dsl import dsl

    spec = dsl(notifier=Character())

    @spec.describe("addition")
    def addition(ctx):
        ctx.let("total", lambda t: 1 + 1)
        ctx.it("adds", lambda t: t.assert_equal(2, t.total))

    spec.run()

The module-level functions declare on a lazily created default spec, which
is what the `treespec` command runs for files that do not build their own.
"""

import logging
from typing import Any

from treespec.config import RunConfig
from treespec.core.context import Context
from treespec.core.declarations import DSL

logger = logging.getLogger(__name__)


class Spec(DSL):
    """
    A root context bound to a run configuration.

    Params:
        config: Base configuration, defaults are used when None
        **options: Configuration overrides, see `RunConfig`

    Raises:
        ConfigurationError: If an option is unknown or invalid
    """

    def __init__(self, config: RunConfig | None = None, **options: Any):
        if config is None:
            self.config = RunConfig.build(**options)
        else:
            self.config = config.merged(**options) if options else config
        self.root = Context.make_root(self.config.pipeline)

    def _declaration_context(self) -> Context:
        return self.root

    @property
    def is_empty(self) -> bool:
        return next(self.root.flatten(), None) is None

    def run(self, **overrides: Any) -> bool:
        """
        Run every declared test.

        Params:
            **overrides: Configuration overrides for this run only

        Returns:
            The notifier's verdict, True when every test passed
        """
        config = self.config.merged(**overrides) if overrides else self.config
        self.root.pipeline = config.pipeline
        logger.debug("Running spec with %s and %r", type(config.scheduler).__name__, config.pipeline)
        return config.scheduler.run(self.root, config)


def dsl(**options: Any) -> Spec:
    """Create an independent spec, see `RunConfig` for the options."""
    return Spec(**options)


_default_spec: Spec | None = None


def default_spec() -> Spec:
    """The spec used by the module-level declaration functions."""
    global _default_spec
    if _default_spec is None:
        _default_spec = Spec()
    return _default_spec


def reset_default_spec() -> Spec | None:
    """Discard the default spec, returning it. The next declaration starts a fresh one."""
    global _default_spec
    previous, _default_spec = _default_spec, None
    return previous


def describe(*args: Any, **kwargs: Any):
    return default_spec().describe(*args, **kwargs)


def it(*args: Any, **kwargs: Any):
    return default_spec().it(*args, **kwargs)


def let(*args: Any, **kwargs: Any):
    return default_spec().let(*args, **kwargs)


def helper(*args: Any, **kwargs: Any):
    return default_spec().helper(*args, **kwargs)


def shared_context(*args: Any, **kwargs: Any):
    return default_spec().shared_context(*args, **kwargs)


def include_context(*args: Any, **kwargs: Any):
    return default_spec().include_context(*args, **kwargs)


def run(**overrides: Any) -> bool:
    """Run the default spec."""
    return default_spec().run(**overrides)
