"""
Tests for short ids and message rendering helpers.
"""

import random
import string

from treespec.core import debug_repr, default_short_id, render_call
from treespec.core.short_id import SHORT_ID_LENGTH, to_base


class Named:
    def __init__(self, full_name):
        self.full_name = full_name


class TestShortId:
    """Tests for default_short_id."""

    def test_deterministic(self):
        """The same full name always yields the same id."""
        assert default_short_id(Named("a b c")) == default_short_id(Named("a b c"))

    def test_fixed_length_for_random_names(self):
        """Ids for 100 random names all have the same fixed length."""
        rng = random.Random(42)
        names = {"".join(rng.choices(string.printable, k=rng.randint(0, 40))) for _ in range(100)}
        ids = [default_short_id(Named(name)) for name in names]
        assert {len(short_id) for short_id in ids} == {SHORT_ID_LENGTH}

    def test_base_32_alphabet(self):
        """Ids only use the digits 0-9 and a-v."""
        allowed = set("0123456789abcdefghijklmnopqrstuv")
        for index in range(50):
            assert set(default_short_id(Named(f"test {index}"))) <= allowed

    def test_different_names_usually_differ(self):
        """Distinct names spread over the id space."""
        ids = {default_short_id(Named(f"name {index}")) for index in range(20)}
        assert len(ids) > 1

    def test_to_base(self):
        """Numbers are rendered with lowercase digits."""
        assert to_base(0) == "0"
        assert to_base(31) == "v"
        assert to_base(32) == "10"
        assert to_base(32**2) == "100"


class TestDebugRepr:
    """Tests for debug_repr."""

    def test_strings_are_double_quoted(self):
        """Strings render with double quotes and escapes."""
        assert debug_repr("b") == '"b"'
        assert debug_repr('say "hi"') == '"say \\"hi\\""'

    def test_containers_render_recursively(self):
        """Nested strings stay double quoted inside containers."""
        assert debug_repr([1, "a"]) == '[1, "a"]'
        assert debug_repr(("a",)) == '("a",)'
        assert debug_repr({"k": None}) == '{"k": None}'
        assert debug_repr({"b", "a"}) == '{"a", "b"}'

    def test_other_values_use_repr(self):
        """Non-container values fall back to repr."""
        assert debug_repr(1.5) == "1.5"
        assert debug_repr(None) == "None"
        assert debug_repr(set()) == "set()"


class TestRenderCall:
    """Tests for render_call."""

    def test_positional_and_keyword_arguments(self):
        """Keyword arguments follow positional ones."""
        assert render_call("store", (1, "a"), {"msg": "hello"}) == 'store(1, "a", msg="hello")'

    def test_no_arguments(self):
        """A call without arguments renders empty parentheses."""
        assert render_call("ping") == "ping()"
