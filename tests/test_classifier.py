"""Tests for outcome classification."""

import pytest

from tagrunner.assertions import AssertionsRuntimeError
from tagrunner.core.classifier import Invocation, OutcomeClassifier
from tagrunner.core.guard import DeadlineExceeded
from tagrunner.models import AssertionFailure, Success, TimeoutFailure, UnhandledError


class TestOutcomeClassifier:
    """Tests for OutcomeClassifier."""

    def test_normal_return_is_success(self):
        """Test that no error means success."""
        invocation = Invocation()
        assert invocation.returned_normally
        assert OutcomeClassifier().classify(invocation) == Success()

    def test_assertion_signal(self):
        """Test expected and actual are carried over."""
        invocation = Invocation(error=AssertionsRuntimeError(expected="5", actual="4"))

        outcome = OutcomeClassifier().classify(invocation)

        assert outcome == AssertionFailure(expected="5", actual="4")

    def test_timeout_signal(self):
        """Test that a deadline signal keeps its limit."""
        outcome = OutcomeClassifier().classify(Invocation(error=DeadlineExceeded(100)))
        assert outcome == TimeoutFailure(limit_millis=100)

    def test_other_error_is_reported(self):
        """Test that other errors become UnhandledError instead of vanishing."""
        error = ZeroDivisionError("division by zero")

        outcome = OutcomeClassifier().classify(Invocation(error=error))

        assert isinstance(outcome, UnhandledError)
        assert outcome.cause is error
        assert outcome.error_type == "ZeroDivisionError"

    def test_plain_assert_is_unhandled(self):
        """Test that a bare AssertionError is not the typed signal."""
        outcome = OutcomeClassifier().classify(Invocation(error=AssertionError("boom")))
        assert isinstance(outcome, UnhandledError)

    def test_keyboard_interrupt_is_not_classified(self):
        """Test that interrupts propagate."""
        with pytest.raises(KeyboardInterrupt):
            OutcomeClassifier().classify(Invocation(error=KeyboardInterrupt()))
