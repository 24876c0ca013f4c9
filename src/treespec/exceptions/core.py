"""
Exception classes for treespec test execution.

This module defines the error taxonomy used while building and running a
context tree. Assertion and double failures are recognised by the execution
pipeline and translated into `Failure` values; every other exception leaking
from a test body is reported as a code exception by the outermost layer.
"""


class TreeSpecError(Exception):
    """Base exception for all treespec-related errors."""

    pass


class AssertionFailed(TreeSpecError):
    """Raised by assertion helpers when a proposition does not hold."""

    def __init__(self, message: str | None = None):
        """
        Initialize the exception.

        Params:
            message: Failure description, defaults to "assertion failed"
        """
        self.message = message or "assertion failed"
        super().__init__(self.message)


class DoubleFailure(TreeSpecError):
    """Raised when a test double is used in a way that violates its expectations."""

    def __init__(self, message: str):
        """
        Initialize the exception.

        Params:
            message: Human readable description of the violation
        """
        self.message = message
        super().__init__(message)


class UnresolvedTypeError(DoubleFailure):
    """Raised in strict mode when a doubled type name cannot be resolved."""

    def __init__(self, type_name: str):
        """
        Initialize the exception.

        Params:
            type_name: The type name that could not be resolved
        """
        self.type_name = type_name
        super().__init__(f"{type_name} is not a valid class name")


class UnimplementedMethodError(DoubleFailure):
    """Raised when a double is configured with a method its type does not provide."""

    def __init__(self, type_name: str, method_name: str, separator: str):
        """
        Initialize the exception.

        Params:
            type_name: Name of the doubled type
            method_name: The method that is missing or not public
            separator: "#" for instance doubles, "." for class doubles
        """
        self.type_name = type_name
        self.method_name = method_name
        super().__init__(
            f"{type_name}{separator}{method_name} is unimplemented or not public"
        )


class SchedulerStateError(TreeSpecError):
    """Raised when a scheduler is asked to run while a run is in progress."""

    def __init__(self, scheduler: str, state: str):
        """
        Initialize the exception.

        Params:
            scheduler: Class name of the scheduler
            state: The state the scheduler was in
        """
        self.scheduler = scheduler
        self.state = state
        super().__init__(f"Cannot start {scheduler}: run is already {state}")


class ConfigurationError(TreeSpecError):
    """Raised when a run configuration is missing or has invalid components."""

    def __init__(self, issues: list[str]):
        """
        Initialize the exception.

        Params:
            issues: List of configuration problems found
        """
        self.issues = issues
        issue_summary = "; ".join(issues)
        super().__init__(f"Invalid run configuration: {issue_summary}")
