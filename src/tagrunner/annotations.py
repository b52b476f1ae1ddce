"""Decorators that tag methods with lifecycle roles.

Tags are plain data attached to the function object. The engine never looks
at method names; it only checks which tags a public method carries.

Example:
    class Arithmetic:
        @before_all
        def connect(self): ...

        @test
        @timeout(2, TimeUnit.SECONDS)
        @description("adds two numbers")
        def addition(self): ...
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

TAGS_ATTRIBUTE = "__tagrunner_tags__"


class TimeUnit(str, Enum):
    """Units accepted by the timeout tag."""

    MILLISECOND = "MILLISECOND"
    SECONDS = "SECONDS"
    MINUTES = "MINUTES"


class Role(str, Enum):
    """Lifecycle role a method can play."""

    TEST = "test"
    BEFORE_EACH = "before_each"
    BEFORE_ALL = "before_all"
    AFTER_EACH = "after_each"
    AFTER_ALL = "after_all"


@dataclass
class MethodTags:
    """Tags attached to a single function."""

    roles: set[Role] = field(default_factory=set)
    timeout_time: Any = None
    timeout_unit: Any = None
    description: Optional[str] = None

    @property
    def has_timeout(self) -> bool:
        return self.timeout_time is not None


def get_tags(func: Any) -> Optional[MethodTags]:
    """Return the tags of a function, unwrapping static and class methods."""
    if isinstance(func, (staticmethod, classmethod)):
        func = func.__func__
    return getattr(func, TAGS_ATTRIBUTE, None)


def _tags_for(func: Any) -> MethodTags:
    target = func.__func__ if isinstance(func, (staticmethod, classmethod)) else func
    tags = getattr(target, TAGS_ATTRIBUTE, None)
    if tags is None:
        tags = MethodTags()
        setattr(target, TAGS_ATTRIBUTE, tags)
    return tags


def _role_decorator(role: Role) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        _tags_for(func).roles.add(role)
        return func

    decorator.__name__ = role.value
    decorator.__doc__ = f"Mark a method with the '{role.value}' role."
    return decorator


test = _role_decorator(Role.TEST)
# Prevent pytest from collecting the decorator itself when it is imported
# into a test module.
test.__test__ = False  # type: ignore[attr-defined]
before_method = _role_decorator(Role.BEFORE_EACH)
before_all = _role_decorator(Role.BEFORE_ALL)
after_method = _role_decorator(Role.AFTER_EACH)
after_all = _role_decorator(Role.AFTER_ALL)


def timeout(time: int, time_unit: Any = TimeUnit.MILLISECOND) -> Callable[[F], F]:
    """Bound the visible duration of a test.

    The values are stored as given and validated during discovery, so an
    unknown unit surfaces as a configuration error for the whole class.

    Args:
        time: Positive duration
        time_unit: One of TimeUnit (or its name); defaults to milliseconds
    """

    def decorator(func: F) -> F:
        tags = _tags_for(func)
        tags.timeout_time = time
        tags.timeout_unit = time_unit
        return func

    return decorator


def description(message: str) -> Callable[[F], F]:
    """Attach a human-readable description shown next to the test's result."""

    def decorator(func: F) -> F:
        _tags_for(func).description = message
        return func

    return decorator
