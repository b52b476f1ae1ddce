"""Data models for discovered methods and test outcomes."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from tagrunner.annotations import Role, TimeUnit
from tagrunner.errors import ClassRunError, InvalidTimeoutError

_MILLIS_PER_UNIT = {
    TimeUnit.MILLISECOND: 1,
    TimeUnit.SECONDS: 1000,
    TimeUnit.MINUTES: 60 * 1000,
}


@dataclass(frozen=True)
class TimeoutSpec:
    """A duration and unit bounding a test invocation.

    A unit given by name is coerced to TimeUnit.

    Raises:
        InvalidTimeoutError: If unit is unknown or time is not a positive int
    """

    time: int
    unit: TimeUnit = TimeUnit.MILLISECOND

    def __post_init__(self) -> None:
        time = self.time
        if isinstance(time, bool) or not isinstance(time, int) or time <= 0:
            raise InvalidTimeoutError(
                "TimeoutSpec", f"time must be a positive integer, got {time!r}"
            )

        if not isinstance(self.unit, TimeUnit):
            unit = None
            if isinstance(self.unit, str):
                try:
                    unit = TimeUnit(self.unit.upper())
                except ValueError:
                    pass
            if unit is None:
                allowed = ", ".join(u.value for u in TimeUnit)
                raise InvalidTimeoutError(
                    "TimeoutSpec", f"unknown time unit {self.unit!r} (allowed: {allowed})"
                )
            object.__setattr__(self, "unit", unit)

    @property
    def limit_millis(self) -> int:
        """Duration normalized to milliseconds."""
        return self.time * _MILLIS_PER_UNIT[self.unit]

    @property
    def limit_seconds(self) -> float:
        return self.limit_millis / 1000

    @classmethod
    def parse(cls, method_name: str, time: Any, unit: Any) -> "TimeoutSpec":
        """Validate raw tag values, naming the tagged method on failure.

        Raises:
            InvalidTimeoutError: If unit is unknown or time is not a positive int
        """
        try:
            return cls(time=time, unit=unit)
        except InvalidTimeoutError as e:
            raise InvalidTimeoutError(method_name, e.reason) from None


@dataclass(frozen=True)
class MethodHandle:
    """A tagged method of a test class.

    Handles are built from the class; `bind` resolves them against the
    single instance of a class run.
    """

    name: str
    roles: frozenset[Role]
    timeout: Optional[TimeoutSpec] = None
    description: Optional[str] = None

    def has_role(self, role: Role) -> bool:
        return role in self.roles

    def bind(self, instance: Any) -> Callable[[], Any]:
        return getattr(instance, self.name)

    def invoke(self, instance: Any) -> Any:
        return self.bind(instance)()


@dataclass
class DiscoveredMethods:
    """Handles of a test class partitioned by role, in discovery order."""

    tests: list[MethodHandle] = field(default_factory=list)
    before_each: list[MethodHandle] = field(default_factory=list)
    before_all: list[MethodHandle] = field(default_factory=list)
    after_each: list[MethodHandle] = field(default_factory=list)
    after_all: list[MethodHandle] = field(default_factory=list)

    def by_role(self, role: Role) -> list[MethodHandle]:
        return {
            Role.TEST: self.tests,
            Role.BEFORE_EACH: self.before_each,
            Role.BEFORE_ALL: self.before_all,
            Role.AFTER_EACH: self.after_each,
            Role.AFTER_ALL: self.after_all,
        }[role]

    @property
    def total(self) -> int:
        return (
            len(self.tests)
            + len(self.before_each)
            + len(self.before_all)
            + len(self.after_each)
            + len(self.after_all)
        )


class OutcomeStatus(str, Enum):
    """Kind of a test outcome."""

    SUCCESS = "success"
    ASSERTION_FAILURE = "assertion_failure"
    TIMEOUT_FAILURE = "timeout_failure"
    UNHANDLED_ERROR = "unhandled_error"


@dataclass(frozen=True)
class Outcome(ABC):
    """Classified result of one test invocation."""

    @property
    @abstractmethod
    def status(self) -> OutcomeStatus:
        """Kind of this outcome."""

    @property
    def passed(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    def to_dict(self) -> dict:
        return {"status": self.status.value}


@dataclass(frozen=True)
class Success(Outcome):
    @property
    def status(self) -> OutcomeStatus:
        return OutcomeStatus.SUCCESS


@dataclass(frozen=True)
class AssertionFailure(Outcome):
    expected: Any = None
    actual: Any = None

    @property
    def status(self) -> OutcomeStatus:
        return OutcomeStatus.ASSERTION_FAILURE

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "expected": str(self.expected),
            "actual": str(self.actual),
        }


@dataclass(frozen=True)
class TimeoutFailure(Outcome):
    limit_millis: int = 0

    @property
    def status(self) -> OutcomeStatus:
        return OutcomeStatus.TIMEOUT_FAILURE

    def to_dict(self) -> dict:
        return {"status": self.status.value, "limit_millis": self.limit_millis}


@dataclass(frozen=True)
class UnhandledError(Outcome):
    cause: Optional[BaseException] = None

    @property
    def status(self) -> OutcomeStatus:
        return OutcomeStatus.UNHANDLED_ERROR

    @property
    def error_type(self) -> str:
        return type(self.cause).__name__ if self.cause is not None else "Error"

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "error_type": self.error_type,
            "message": str(self.cause) if self.cause is not None else "",
        }


@dataclass(frozen=True)
class MethodReport:
    """What the reporter receives for one test method."""

    class_name: str
    method_name: str
    outcome: Outcome
    description: Optional[str] = None
    duration_ms: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "class_name": self.class_name,
            "method_name": self.method_name,
            "description": self.description,
            "duration_ms": self.duration_ms,
            **self.outcome.to_dict(),
        }


@dataclass
class ClassReport:
    """Results of one class run."""

    class_name: str
    results: list[MethodReport] = field(default_factory=list)
    error: Optional[ClassRunError] = None

    @property
    def aborted(self) -> bool:
        return self.error is not None

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.outcome.passed)

    @property
    def failed(self) -> int:
        return len(self.results) - self.passed

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "class_name": self.class_name,
            "results": [r.to_dict() for r in self.results],
            "passed": self.passed,
            "failed": self.failed,
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass
class RunSummary:
    """Aggregate of a whole registry run."""

    classes: list[ClassReport] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def results(self) -> list[MethodReport]:
        return [r for c in self.classes for r in c.results]

    @property
    def errors(self) -> list[ClassRunError]:
        return [c.error for c in self.classes if c.error is not None]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(c.passed for c in self.classes)

    @property
    def failed(self) -> int:
        return sum(c.failed for c in self.classes)

    @property
    def success(self) -> bool:
        """True when every test passed and no class aborted."""
        return self.failed == 0 and not self.errors

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for r in self.results if r.outcome.status == status)

    @property
    def duration_ms(self) -> int:
        if self.started_at and self.finished_at:
            return int((self.finished_at - self.started_at).total_seconds() * 1000)
        return 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_ms": self.duration_ms,
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "aborted": len(self.errors),
            "classes": [c.to_dict() for c in self.classes],
        }
