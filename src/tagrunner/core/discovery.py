"""Discovery of tagged methods on a test class."""

import inspect
import logging
from typing import Any

from tagrunner.annotations import Role, get_tags
from tagrunner.errors import UnsupportedMethodError
from tagrunner.models import DiscoveredMethods, MethodHandle, TimeoutSpec

logger = logging.getLogger(__name__)


class Discoverer:
    """Partitions the public methods of a test class by role tag."""

    def discover(self, test_class: type) -> DiscoveredMethods:
        """Discover all tagged methods of a test class.

        Methods are enumerated in declaration order, base classes first. A
        method with no recognized tag is ignored.

        Raises:
            InvalidTimeoutError: If a timeout tag is malformed
            UnsupportedMethodError: If a tagged method is a coroutine function
        """
        discovered = DiscoveredMethods()

        for name, member in self._public_members(test_class):
            tags = get_tags(member)
            if tags is None or not tags.roles:
                continue

            func = getattr(member, "__func__", member)
            if inspect.iscoroutinefunction(func) or inspect.isasyncgenfunction(func):
                raise UnsupportedMethodError(
                    f"{test_class.__qualname__}.{name}",
                    "async methods are not supported",
                )

            timeout = None
            if tags.has_timeout:
                timeout = TimeoutSpec.parse(
                    f"{test_class.__qualname__}.{name}",
                    tags.timeout_time,
                    tags.timeout_unit,
                )

            handle = MethodHandle(
                name=name,
                roles=frozenset(tags.roles),
                timeout=timeout,
                description=tags.description,
            )
            for role in Role:
                if handle.has_role(role):
                    discovered.by_role(role).append(handle)

        logger.debug(
            f"Discovered {len(discovered.tests)} tests and "
            f"{discovered.total - len(discovered.tests)} hooks on {test_class.__qualname__}"
        )
        return discovered

    @staticmethod
    def _public_members(test_class: type) -> list[tuple[str, Any]]:
        """List public callables, keeping the position of their first declaration."""
        members: dict[str, Any] = {}
        for klass in reversed(inspect.getmro(test_class)):
            if klass is object:
                continue
            for name, value in vars(klass).items():
                if name.startswith("_"):
                    continue
                members[name] = value

        return [
            (name, value)
            for name, value in members.items()
            if callable(value) or isinstance(value, (staticmethod, classmethod))
        ]
