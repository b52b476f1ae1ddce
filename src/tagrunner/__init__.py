"""
TagRunner - a minimal test-execution engine driven by method tags.

This package provides tools to:
- Tag methods of a class as tests and lifecycle hooks
- Run them in a fixed order with before/after brackets
- Bound individual tests by a wall-clock deadline
- Classify and report each test's outcome
"""

__version__ = "0.1.0"
__author__ = "TagRunner Team"

from tagrunner.annotations import (
    TimeUnit,
    after_all,
    after_method,
    before_all,
    before_method,
    description,
    test,
    timeout,
)
from tagrunner.core import Registry, cancellation_requested

__all__ = [
    "Registry",
    "TimeUnit",
    "after_all",
    "after_method",
    "before_all",
    "before_method",
    "cancellation_requested",
    "description",
    "test",
    "timeout",
]
