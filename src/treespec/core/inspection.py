"""
Rendering helpers for failure messages.

Failure messages show values in their literal (debug) form so that strings
are quoted and distinguishable from other values, e.g. `foo("a", 1)`.
"""

import json
from types import TracebackType
from traceback import extract_tb
from typing import Any


def debug_repr(value: Any) -> str:
    """
    Render a value in its literal debug form.

    Strings are double quoted, containers are rendered recursively and
    everything else falls back to `repr`.

    Params:
        value: Any value to render

    Returns:
        Debug representation of the value

    Examples:
        "b" -> '"b"'
        [1, "a"] -> '[1, "a"]'
        {"k": None} -> '{"k": None}'
    """
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, list):
        return "[" + ", ".join(debug_repr(item) for item in value) + "]"
    if isinstance(value, tuple):
        if len(value) == 1:
            return f"({debug_repr(value[0])},)"
        return "(" + ", ".join(debug_repr(item) for item in value) + ")"
    if isinstance(value, dict):
        pairs = (f"{debug_repr(k)}: {debug_repr(v)}" for k, v in value.items())
        return "{" + ", ".join(pairs) + "}"
    if isinstance(value, (set, frozenset)) and value:
        return "{" + ", ".join(sorted(debug_repr(item) for item in value)) + "}"
    return repr(value)


def render_call(name: str, args: tuple = (), kwargs: dict | None = None) -> str:
    """
    Render a method call signature with its arguments.

    Params:
        name: Method name
        args: Positional arguments
        kwargs: Keyword arguments

    Returns:
        Signature such as `store(1, "a", msg="hello")`
    """
    rendered = [debug_repr(arg) for arg in args]
    rendered.extend(f"{key}={debug_repr(value)}" for key, value in (kwargs or {}).items())
    return f"{name}({', '.join(rendered)})"


def format_trace(tb: TracebackType | None) -> tuple[str, ...]:
    """
    Convert a traceback into `path:line:in function` entries.

    Params:
        tb: Traceback object, usually `exc.__traceback__`

    Returns:
        Tuple of formatted frame entries, outermost first
    """
    if tb is None:
        return ()
    return tuple(
        f"{frame.filename}:{frame.lineno}:in {frame.name}" for frame in extract_tb(tb)
    )
