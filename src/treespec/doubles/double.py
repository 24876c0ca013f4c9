"""
Test doubles and the proxies used to configure them.

Every attribute of a `Double` that is not one of its own private members
resolves to a callable routing the call to `_receive`. Configuration goes
through a `Proxy` (`stub`, `allow`, `expect`, `verify`) that captures the
method name and arguments the same way and passes them to the double.

Three disciplines can be mixed on one double:

- stub/allow: reusable responses, unmatched calls return None
- expect: one-shot, required responses; once a double carries an
  expectation, calls matching nothing fail immediately
- verify: every call is logged and can be checked after the fact
"""

import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from attrs import field, frozen

from treespec.core.inspection import render_call
from treespec.doubles.references import Reference
from treespec.exceptions import DoubleFailure

logger = logging.getLogger(__name__)


@frozen
class Call:
    """A method name with its exact positional and keyword arguments."""

    name: str
    args: tuple = field(default=(), converter=tuple)
    kwargs: dict = field(factory=dict, converter=dict)

    def __str__(self) -> str:
        return render_call(self.name, self.args, self.kwargs)


class Registration:
    """A configured call and the response it produces. Defaults to returning None."""

    def __init__(self, call: Call):
        self.call = call
        self._response: Callable[..., Any] = lambda *args, **kwargs: None

    def and_return(self, value: Any) -> "Registration":
        self._response = lambda *args, **kwargs: value
        return self

    def and_call(self, fn: Callable[..., Any]) -> "Registration":
        """Respond by calling `fn` with the arguments of the matching call."""
        self._response = fn
        return self

    def and_raise(self, exc: BaseException) -> "Registration":
        def _raise(*args, **kwargs):
            raise exc

        self._response = _raise
        return self

    def matches(self, call: Call) -> bool:
        return self.call == call

    def respond(self, call: Call) -> Any:
        return self._response(*call.args, **call.kwargs)

    def __str__(self) -> str:
        return str(self.call)


def _render_lines(items: list) -> str:
    return "\n".join(f"  {item}" for item in items)


class Double:
    """
    A stand-in object bound to a type reference.

    Params:
        reference: Validates configured method names against the doubled type
    """

    def __init__(self, reference: Reference):
        self._reference = reference
        self._expected: list[Registration] = []
        self._allowed: list[Registration] = []
        self._received: list[Call] = []
        self._expecting = False

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return partial(self._receive_call, name)

    def __call__(self, *args, **kwargs) -> Any:
        return self._receive(Call("__call__", args, kwargs))

    def __repr__(self) -> str:
        return f"<Double of {self._reference}>"

    def _receive_call(self, name: str, *args, **kwargs) -> Any:
        return self._receive(Call(name, args, kwargs))

    def _receive(self, call: Call) -> Any:
        self._received.append(call)

        for index, registration in enumerate(self._expected):
            if registration.matches(call):
                del self._expected[index]
                return registration.respond(call)

        for registration in self._allowed:
            if registration.matches(call):
                return registration.respond(call)

        if self._expecting:
            message = f"Unexpectedly received: {call}"
            if self._expected:
                message += f"\nStill expecting:\n{_render_lines(self._expected)}"
            raise DoubleFailure(message)
        return None

    def _stub(self, call: Call) -> Registration:
        self._reference.validate_call(call.name)
        registration = Registration(call)
        self._allowed.append(registration)
        return registration

    def _expect(self, call: Call) -> Registration:
        self._reference.validate_call(call.name)
        registration = Registration(call)
        self._expected.append(registration)
        self._expecting = True
        return registration

    def _verify(self, call: Call) -> None:
        self._reference.validate_call(call.name)
        if call in self._received:
            self._received.remove(call)
            return
        received = _render_lines(self._received) if self._received else "  nothing"
        raise DoubleFailure(f"Did not receive: {call}\nDid receive:\n{received}")

    def _assert_exhausted(self) -> None:
        if self._expected:
            raise DoubleFailure(
                "Expectations not met, did not receive:\n"
                f"{_render_lines(self._expected)}"
            )


class Proxy:
    """
    Captures a call and passes it to one of the configuration methods of a double.

    `stub(double).store(msg="hello")` becomes `double._stub(Call("store", (), {"msg": "hello"}))`.
    """

    def __init__(self, double: Double, method: str):
        if not isinstance(double, Double):
            raise TypeError(f"Expected a Double, got {type(double).__name__}")
        self._double = double
        self._method = method

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return partial(self._forward, name)

    def __call__(self, *args, **kwargs) -> Any:
        return self._forward("__call__", *args, **kwargs)

    def _forward(self, name: str, *args, **kwargs) -> Any:
        call = Call(name, args, kwargs)
        logger.debug("%s %s on %r", self._method.lstrip("_"), call, self._double)
        return getattr(self._double, self._method)(call)


def invoke(double: Double, name: str, *args, **kwargs) -> Any:
    """Send a call to a double explicitly, for names that clash with Python syntax."""
    return double._receive(Call(name, args, kwargs))
