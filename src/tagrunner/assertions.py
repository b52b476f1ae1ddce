"""Assertion helpers raising a typed failure signal.

The engine only classifies `AssertionsRuntimeError`; it never raises it.
"""

from typing import Any, Callable, Optional


class AssertionsRuntimeError(AssertionError):
    """Raised when an assertion does not hold.

    Attributes:
        expected: The value the test expected
        actual: The value the test observed
    """

    def __init__(self, expected: Any, actual: Any, message: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message or f"Expected = [{expected}]; actual = [{actual}]")


def assert_equals(expected: Any, actual: Any, message: Optional[str] = None) -> None:
    if expected != actual:
        raise AssertionsRuntimeError(expected, actual, message)


def assert_not_equals(unexpected: Any, actual: Any, message: Optional[str] = None) -> None:
    if unexpected == actual:
        raise AssertionsRuntimeError(f"not {unexpected!r}", actual, message)


def assert_true(value: Any, message: Optional[str] = None) -> None:
    if not value:
        raise AssertionsRuntimeError(True, value, message)


def assert_false(value: Any, message: Optional[str] = None) -> None:
    if value:
        raise AssertionsRuntimeError(False, value, message)


def assert_none(value: Any, message: Optional[str] = None) -> None:
    if value is not None:
        raise AssertionsRuntimeError(None, value, message)


def assert_not_none(value: Any, message: Optional[str] = None) -> None:
    if value is None:
        raise AssertionsRuntimeError("not None", None, message)


def assert_raises(
    expected_type: type[BaseException],
    func: Callable[..., Any],
    *args: Any,
    **kwargs: Any,
) -> BaseException:
    """Call func and return the exception it raised.

    Raises:
        AssertionsRuntimeError: If func returns normally or raises another type
    """
    try:
        func(*args, **kwargs)
    except expected_type as e:
        return e
    except Exception as e:
        raise AssertionsRuntimeError(expected_type.__name__, type(e).__name__) from e
    raise AssertionsRuntimeError(expected_type.__name__, "no exception")
