"""Deterministic short display identifiers for units of work."""

import hashlib
from typing import Protocol

SHORT_ID_LENGTH = 3
SHORT_ID_BASE = 32
_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class HasFullName(Protocol):
    @property
    def full_name(self) -> str: ...


def to_base(number: int, base: int = SHORT_ID_BASE) -> str:
    """Render a non-negative integer in the given base using 0-9a-z digits."""
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, base)
        digits.append(_DIGITS[remainder])
    return "".join(reversed(digits))


def default_short_id(unit_of_work: HasFullName) -> str:
    """
    Derive a fixed-length short id from a unit of work's full name.

    The SHA-1 digest of the full name is reduced into the range
    `[base ** (length - 1), base ** length)` so the rendered id always has
    exactly `SHORT_ID_LENGTH` digits. Collisions are possible and accepted.

    Params:
        unit_of_work: Anything exposing a `full_name` string

    Returns:
        Three character base-32 identifier
    """
    digest = int(hashlib.sha1(unit_of_work.full_name.encode("utf-8")).hexdigest(), 16)
    bottom = SHORT_ID_BASE ** (SHORT_ID_LENGTH - 1)
    top = SHORT_ID_BASE**SHORT_ID_LENGTH
    shifted = digest % (top - bottom) + bottom
    return to_base(shifted)
