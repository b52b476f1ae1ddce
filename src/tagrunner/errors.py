"""
TagRunner errors.

Configuration and fixture failures abort a class run; they are never turned
into test outcomes.
"""

from enum import Enum
from typing import Optional


class LifecyclePhase(str, Enum):
    """Phase of a class run in which a fatal error happened."""

    INSTANTIATE = "instantiate"
    DISCOVER = "discover"
    BEFORE_ALL = "before_all"
    BEFORE_EACH = "before_each"
    AFTER_EACH = "after_each"
    AFTER_ALL = "after_all"


class TagRunnerError(Exception):
    """Base exception for all TagRunner errors."""
    pass


class ConfigurationError(TagRunnerError):
    """A test class is declared in a way the engine cannot run."""
    pass


class InvalidTimeoutError(ConfigurationError):
    """A timeout tag has an unknown unit or a non-positive duration."""

    def __init__(self, method_name: str, reason: str):
        self.method_name = method_name
        self.reason = reason
        super().__init__(f"Invalid timeout on {method_name}: {reason}")


class UnsupportedMethodError(ConfigurationError):
    """A tagged method cannot be called synchronously by the engine."""

    def __init__(self, method_name: str, reason: str):
        self.method_name = method_name
        self.reason = reason
        super().__init__(f"Unsupported method {method_name}: {reason}")


class InstantiationError(ConfigurationError):
    """A test class could not be built with its zero-argument constructor."""

    def __init__(self, test_class: type, cause: BaseException):
        self.test_class = test_class
        self.cause = cause
        super().__init__(
            f"Cannot instantiate {_qualname(test_class)}: {type(cause).__name__}: {cause}"
        )


class ClassRunError(TagRunnerError):
    """A fatal failure that aborted the run of one test class."""

    def __init__(
        self,
        test_class: type,
        phase: LifecyclePhase,
        cause: BaseException,
        method_name: Optional[str] = None,
        results: Optional[list] = None,
    ):
        self.test_class = test_class
        self.phase = phase
        self.cause = cause
        self.method_name = method_name
        # Reports of tests that completed before the abort
        self.results = results or []

        location = f"{phase.value}"
        if method_name:
            location += f" ({method_name})"
        super().__init__(
            f"{_qualname(test_class)} aborted during {location}: "
            f"{type(cause).__name__}: {cause}"
        )

    @property
    def class_name(self) -> str:
        return _qualname(self.test_class)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "class_name": self.class_name,
            "phase": self.phase.value,
            "method_name": self.method_name,
            "error_type": type(self.cause).__name__,
            "message": str(self.cause),
        }


class RunAbortedError(TagRunnerError):
    """Raised after a run in which one or more classes aborted."""

    def __init__(self, errors: list[ClassRunError]):
        self.errors = errors
        names = ", ".join(e.class_name for e in errors)
        super().__init__(f"{len(errors)} test class(es) aborted: {names}")


def _qualname(test_class: type) -> str:
    return getattr(test_class, "__qualname__", repr(test_class))
