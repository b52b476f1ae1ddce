"""Construction of test class instances."""

import inspect
import logging
from typing import Any

from tagrunner.errors import InstantiationError

logger = logging.getLogger(__name__)


class InstanceFactory:
    """Builds the single instance used for one class run."""

    def create(self, test_class: type) -> Any:
        """Instantiate a test class with its zero-argument constructor.

        Raises:
            InstantiationError: If the class is not a class, needs arguments,
                or its constructor raises
        """
        if not inspect.isclass(test_class):
            raise InstantiationError(
                test_class, TypeError(f"{test_class!r} is not a class")
            )

        try:
            instance = test_class()
        except Exception as e:
            raise InstantiationError(test_class, e) from e

        logger.debug(f"Created instance of {test_class.__qualname__}")
        return instance
