"""Classification of test invocation results."""

from dataclasses import dataclass
from typing import Optional

from tagrunner.assertions import AssertionsRuntimeError
from tagrunner.core.guard import DeadlineExceeded
from tagrunner.models import (
    AssertionFailure,
    Outcome,
    Success,
    TimeoutFailure,
    UnhandledError,
)


@dataclass
class Invocation:
    """Raw result of calling a test method."""

    error: Optional[BaseException] = None
    duration_ms: int = 0

    @property
    def returned_normally(self) -> bool:
        return self.error is None


class OutcomeClassifier:
    """Maps an invocation result to exactly one Outcome."""

    def classify(self, invocation: Invocation) -> Outcome:
        """Classify an invocation.

        Errors other than the assertion and timeout signals are reported as
        UnhandledError instead of being dropped.

        Raises:
            BaseException: KeyboardInterrupt, SystemExit and other
                non-Exception signals are re-raised, not classified
        """
        error = invocation.error

        if error is None:
            return Success()

        if isinstance(error, AssertionsRuntimeError):
            return AssertionFailure(expected=error.expected, actual=error.actual)

        if isinstance(error, DeadlineExceeded):
            return TimeoutFailure(limit_millis=error.limit_millis)

        if not isinstance(error, Exception):
            raise error

        return UnhandledError(cause=error)
