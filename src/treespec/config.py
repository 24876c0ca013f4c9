"""
Run configuration.

`RunConfig` gathers the collaborators of a run: the notifier observing it,
the scheduler walking the context tree, the pipeline executing units of
work and the short id function used in reports. Collaborators are duck
typed, so validation only checks that the required methods are present.
"""

from collections.abc import Callable
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from treespec.core.short_id import default_short_id
from treespec.evaluators import DEFAULT_PIPELINE
from treespec.exceptions import ConfigurationError
from treespec.notifiers import default_notifier
from treespec.schedulers import Serial

NOTIFIER_METHODS = ("run_start", "evaluate_start", "evaluate_finish", "run_finish")
SCHEDULER_METHODS = ("run",)
PIPELINE_METHODS = ("install", "execute")

# Historical option names still accepted as keyword arguments
ALIASES = {"evaluator": "scheduler", "assertion_context": "pipeline"}


def _require_methods(value: Any, kind: str, methods: tuple[str, ...]) -> Any:
    missing = [method for method in methods if not callable(getattr(value, method, None))]
    if missing:
        raise ValueError(f"{kind} {value!r} does not implement {', '.join(missing)}")
    return value


class RunConfig(BaseModel):
    """
    Immutable run configuration.

    Params:
        notifier: Observer of the run, a fresh default notifier when omitted
        scheduler: Execution policy, also accepted as `evaluator`; a fresh `Serial` when omitted
        pipeline: Pipeline of the root context, also accepted as `assertion_context`
        short_id: Function from a nested unit of work to its display id
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="forbid")

    notifier: Any = Field(default_factory=default_notifier)
    scheduler: Any = Field(
        default_factory=Serial,
        validation_alias=AliasChoices("scheduler", "evaluator"),
    )
    pipeline: Any = Field(
        default=DEFAULT_PIPELINE,
        validation_alias=AliasChoices("pipeline", "assertion_context"),
    )
    short_id: Callable[[Any], str] = default_short_id

    @field_validator("notifier")
    @classmethod
    def check_notifier(cls, value: Any) -> Any:
        return _require_methods(value, "notifier", NOTIFIER_METHODS)

    @field_validator("scheduler")
    @classmethod
    def check_scheduler(cls, value: Any) -> Any:
        return _require_methods(value, "scheduler", SCHEDULER_METHODS)

    @field_validator("pipeline")
    @classmethod
    def check_pipeline(cls, value: Any) -> Any:
        return _require_methods(value, "pipeline", PIPELINE_METHODS)

    @classmethod
    def build(cls, **options: Any) -> "RunConfig":
        """
        Build a configuration, reporting every invalid option at once.

        Params:
            **options: Any of the fields, or their historical aliases

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If an option is unknown or invalid
        """
        try:
            return cls(**options)
        except ValidationError as exc:
            issues = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            ]
            raise ConfigurationError(issues) from exc

    def merged(self, **overrides: Any) -> "RunConfig":
        """Return a validated copy with `overrides` applied."""
        options = dict(self)
        options.update({ALIASES.get(key, key): value for key, value in overrides.items()})
        return type(self).build(**options)
