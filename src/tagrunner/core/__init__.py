"""Core test execution engine."""

from tagrunner.core.classifier import Invocation, OutcomeClassifier
from tagrunner.core.discovery import Discoverer
from tagrunner.core.executor import ClassRunState, LifecycleExecutor
from tagrunner.core.factory import InstanceFactory
from tagrunner.core.guard import DeadlineExceeded, DeadlineGuard, cancellation_requested
from tagrunner.core.runner import Registry

__all__ = [
    "ClassRunState",
    "DeadlineExceeded",
    "DeadlineGuard",
    "Discoverer",
    "InstanceFactory",
    "Invocation",
    "LifecycleExecutor",
    "OutcomeClassifier",
    "Registry",
    "cancellation_requested",
]
