"""
Tests for test doubles.

Focus Areas:
1. Stub (allow) discipline: reusable responses, silent on unmatched calls
2. Expect discipline: one-shot responses, fail fast on unexpected calls
3. Verify discipline: after-the-fact checks against logged calls
4. Validation of configured methods against the doubled type
"""

import pytest

from treespec.doubles import Double, DoubleSession, NameReference, Proxy, TypeRegistry, invoke
from treespec.exceptions import DoubleFailure, UnimplementedMethodError, UnresolvedTypeError


class Repository:
    """Collaborator used as the doubled type."""

    def store(self, item):
        raise NotImplementedError

    def fetch(self, key):
        raise NotImplementedError

    @classmethod
    def connect(cls, url):
        raise NotImplementedError


@pytest.fixture
def session():
    return DoubleSession(TypeRegistry([Repository]))


class TestStub:
    """Tests for stub/allow."""

    def test_stubbed_response_is_reusable(self, session):
        """A stub answers every matching call."""
        double = session.instance_double("Repository")
        session.stub(double).fetch("a").and_return(1)

        assert double.fetch("a") == 1
        assert double.fetch("a") == 1

    def test_unmatched_call_returns_none(self, session):
        """Calls matching no stub return None instead of failing."""
        double = session.instance_double("Repository")
        session.stub(double).fetch("a").and_return(1)

        assert double.fetch("b") is None

    def test_allow_is_stub(self, session):
        """allow is an alias for stub."""
        double = session.instance_double("Repository")
        session.allow(double).store(item=3).and_return(True)
        assert double.store(item=3) is True

    def test_and_call_receives_arguments(self, session):
        """and_call responds with the result of the function."""
        double = session.instance_double("Repository")
        session.stub(double).fetch("k").and_call(lambda key: key.upper())
        assert double.fetch("k") == "K"

    def test_and_raise(self, session):
        """and_raise raises the given exception."""
        double = session.instance_double("Repository")
        session.stub(double).fetch("k").and_raise(KeyError("k"))
        with pytest.raises(KeyError):
            double.fetch("k")

    def test_default_response_is_none(self, session):
        """A registration without a response returns None."""
        double = session.instance_double("Repository")
        session.stub(double).store(1)
        assert double.store(1) is None

    def test_keyword_and_positional_arguments_differ(self, session):
        """Calls match on their exact positional and keyword arguments."""
        double = session.instance_double("Repository")
        session.stub(double).store(1).and_return("positional")
        assert double.store(item=1) is None


class TestExpect:
    """Tests for expect."""

    def test_expectation_is_consumed(self, session):
        """An expected call responds once and is then removed."""
        double = session.instance_double("Repository")
        session.expect(double).fetch("a").and_return(1)

        assert double.fetch("a") == 1
        assert session.assert_exhausted(double) is True

    def test_unexpected_call_fails_immediately(self, session):
        """Once a double expects calls, unmatched calls fail fast."""
        double = session.instance_double("Repository")
        session.expect(double).fetch("a")

        with pytest.raises(DoubleFailure) as exc_info:
            double.fetch("b")

        assert "Unexpectedly received" in exc_info.value.message
        assert 'fetch("b")' in exc_info.value.message
        assert 'fetch("a")' in exc_info.value.message

    def test_second_call_after_consumption_fails(self, session):
        """Expectations are one-shot."""
        double = session.instance_double("Repository")
        session.expect(double).fetch("a")
        double.fetch("a")

        with pytest.raises(DoubleFailure, match="Unexpectedly received"):
            double.fetch("a")

    def test_stubs_still_answer_when_expecting(self, session):
        """Allowed calls remain valid on a double carrying expectations."""
        double = session.instance_double("Repository")
        session.allow(double).store(1).and_return("ok")
        session.expect(double).fetch("a")

        assert double.store(1) == "ok"

    def test_assert_exhausted_lists_missing_calls(self, session):
        """Unconsumed expectations are reported with their signature."""
        double = session.instance_double("Repository")
        session.expect(double).fetch("a", fresh=True)

        with pytest.raises(DoubleFailure) as exc_info:
            session.assert_exhausted(double)

        assert "did not receive" in exc_info.value.message
        assert 'fetch("a", fresh=True)' in exc_info.value.message

    def test_unexhausted_collects_every_double(self, session):
        """The session reports every double with pending expectations."""
        first = session.instance_double("Repository")
        second = session.instance_double("Repository")
        session.expect(first).fetch("a")
        session.expect(second).store(1)
        second.store(1)

        failures = session.unexhausted()
        assert len(failures) == 1
        assert 'fetch("a")' in failures[0].message


class TestVerify:
    """Tests for verify."""

    def test_verify_received_call(self, session):
        """A logged call verifies without configuration."""
        double = session.instance_double("Repository")
        double.store(1)
        session.verify(double).store(1)

    def test_verify_consumes_logged_call(self, session):
        """Each logged call satisfies one verification."""
        double = session.instance_double("Repository")
        double.store(1)
        session.verify(double).store(1)

        with pytest.raises(DoubleFailure, match="Did not receive"):
            session.verify(double).store(1)

    def test_verify_reports_received_calls(self, session):
        """The failure lists what was actually received."""
        double = session.instance_double("Repository")
        double.store(2)

        with pytest.raises(DoubleFailure) as exc_info:
            session.verify(double).store(1)

        assert exc_info.value.message == "Did not receive: store(1)\nDid receive:\n  store(2)"

    def test_verify_with_nothing_received(self, session):
        """An untouched double reports that nothing was received."""
        double = session.instance_double("Repository")
        with pytest.raises(DoubleFailure) as exc_info:
            session.verify(double).fetch("a")
        assert exc_info.value.message.endswith("Did receive:\n  nothing")


class TestValidation:
    """Tests for validating configured methods against the doubled type."""

    def test_instance_double_rejects_unknown_method(self, session):
        """Stubbing a method the type lacks names Type#method."""
        double = session.instance_double("Repository")
        with pytest.raises(UnimplementedMethodError) as exc_info:
            session.stub(double).delete(1)
        assert "Repository#delete" in str(exc_info.value)
        assert "is unimplemented or not public" in str(exc_info.value)

    def test_instance_double_rejects_private_method(self, session):
        """Private methods are not part of the public surface."""
        double = session.instance_double(Repository)
        with pytest.raises(UnimplementedMethodError, match="Repository#_helper"):
            session.expect(double)._helper()

    def test_class_double_validates_class_surface(self, session):
        """Class doubles allow classmethods and construction but not instance methods."""
        double = session.class_double("Repository")
        session.stub(double).connect("db://").and_return("connection")
        session.stub(double)().and_return("instance")

        assert double.connect("db://") == "connection"
        assert double() == "instance"
        with pytest.raises(UnimplementedMethodError, match=r"Repository\.store"):
            session.stub(double).store(1)

    def test_unresolved_type_is_permissive(self, session):
        """Doubles of unknown types accept any method outside strict mode."""
        double = session.instance_double("Unknown")
        session.stub(double).anything(1).and_return(2)
        assert double.anything(1) == 2
        assert isinstance(double._reference, NameReference)

    def test_strict_mode_rejects_unresolved_type(self):
        """Strict sessions refuse to double unknown names."""
        strict = DoubleSession(TypeRegistry(), strict=True)
        with pytest.raises(UnresolvedTypeError, match="Unknown is not a valid class name"):
            strict.instance_double("Unknown")


class TestProxy:
    """Tests for proxies and explicit invocation."""

    def test_proxy_requires_a_double(self):
        """Configuring a non-double is a type error."""
        with pytest.raises(TypeError):
            Proxy(object(), "_stub")

    def test_invoke(self, session):
        """invoke sends an explicitly named call."""
        double = session.instance_double("Repository")
        session.stub(double).fetch("a").and_return(1)
        assert invoke(double, "fetch", "a") == 1

    def test_double_repr(self, session):
        """Doubles describe the type they stand in for."""
        double = session.instance_double("Repository")
        assert isinstance(double, Double)
        assert repr(double) == "<Double of Repository>"
