"""Lifecycle execution of a single test class.

A class run moves through fixed states:

    INIT -> RUNNING_BEFORE_ALL -> RUNNING_TESTS -> RUNNING_AFTER_ALL -> DONE

Every test is bracketed by all before-each and after-each hooks. Only the test
body's own result is classified; a failing fixture, a failing constructor or a
malformed timeout tag aborts the class with `ClassRunError`.
"""

import logging
import time
from enum import Enum
from typing import Any, Optional

from tagrunner.core.classifier import Invocation, OutcomeClassifier
from tagrunner.core.discovery import Discoverer
from tagrunner.core.factory import InstanceFactory
from tagrunner.core.guard import DeadlineGuard
from tagrunner.errors import ClassRunError, ConfigurationError, LifecyclePhase
from tagrunner.models import ClassReport, DiscoveredMethods, MethodHandle, MethodReport
from tagrunner.report.base import Reporter

logger = logging.getLogger(__name__)


class ClassRunState(str, Enum):
    """State of the class currently being run."""

    INIT = "init"
    RUNNING_BEFORE_ALL = "running_before_all"
    RUNNING_TESTS = "running_tests"
    RUNNING_AFTER_ALL = "running_after_all"
    DONE = "done"


class LifecycleExecutor:
    """Runs one test class end-to-end and reports each outcome."""

    def __init__(
        self,
        reporter: Reporter,
        discoverer: Optional[Discoverer] = None,
        factory: Optional[InstanceFactory] = None,
        guard: Optional[DeadlineGuard] = None,
        classifier: Optional[OutcomeClassifier] = None,
    ):
        """Initialize the executor.

        Args:
            reporter: Receives one MethodReport per test
            discoverer: Finds tagged methods (default: Discoverer())
            factory: Builds the class instance (default: InstanceFactory())
            guard: Enforces timeout tags (default: DeadlineGuard())
            classifier: Maps invocations to outcomes (default: OutcomeClassifier())
        """
        self.reporter = reporter
        self.discoverer = discoverer or Discoverer()
        self.factory = factory or InstanceFactory()
        self.guard = guard or DeadlineGuard()
        self.classifier = classifier or OutcomeClassifier()
        self.state = ClassRunState.INIT

    def run_class(self, test_class: type) -> ClassReport:
        """Run every test of a class between its fixtures.

        Returns:
            ClassReport with one MethodReport per test, in discovery order

        Raises:
            ClassRunError: If construction, discovery or any fixture fails
        """
        self.state = ClassRunState.INIT
        report = ClassReport(class_name=getattr(test_class, "__qualname__", repr(test_class)))
        self.reporter.class_started(test_class)

        instance = self._create_instance(test_class)
        methods = self._discover(test_class)

        self._transition(ClassRunState.RUNNING_BEFORE_ALL, report)
        self._invoke_fixtures(
            instance, methods.before_all, test_class, LifecyclePhase.BEFORE_ALL, report
        )

        self._transition(ClassRunState.RUNNING_TESTS, report)
        for handle in methods.tests:
            method_report = self._run_test(instance, handle, methods, test_class, report)
            report.results.append(method_report)
            self.reporter.test_finished(method_report)

        self._transition(ClassRunState.RUNNING_AFTER_ALL, report)
        self._invoke_fixtures(
            instance, methods.after_all, test_class, LifecyclePhase.AFTER_ALL, report
        )

        self._transition(ClassRunState.DONE, report)
        self.reporter.class_finished(report)
        return report

    def _transition(self, state: ClassRunState, report: ClassReport) -> None:
        logger.debug(f"{report.class_name}: {self.state.value} -> {state.value}")
        self.state = state

    def _create_instance(self, test_class: type) -> Any:
        try:
            return self.factory.create(test_class)
        except ConfigurationError as e:
            raise ClassRunError(test_class, LifecyclePhase.INSTANTIATE, e) from e

    def _discover(self, test_class: type) -> DiscoveredMethods:
        try:
            return self.discoverer.discover(test_class)
        except ConfigurationError as e:
            raise ClassRunError(test_class, LifecyclePhase.DISCOVER, e) from e

    def _run_test(
        self,
        instance: Any,
        handle: MethodHandle,
        methods: DiscoveredMethods,
        test_class: type,
        report: ClassReport,
    ) -> MethodReport:
        self._invoke_fixtures(
            instance, methods.before_each, test_class, LifecyclePhase.BEFORE_EACH, report
        )
        invocation = self._invoke_test(instance, handle, report.class_name)
        self._invoke_fixtures(
            instance, methods.after_each, test_class, LifecyclePhase.AFTER_EACH, report
        )

        return MethodReport(
            class_name=report.class_name,
            method_name=handle.name,
            outcome=self.classifier.classify(invocation),
            description=handle.description,
            duration_ms=invocation.duration_ms,
        )

    def _invoke_test(self, instance: Any, handle: MethodHandle, class_name: str) -> Invocation:
        """Call a test body, capturing whatever it raises."""
        start_time = time.monotonic()
        error: Optional[BaseException] = None

        try:
            if handle.timeout is not None:
                self.guard.call(
                    handle.bind(instance),
                    handle.timeout,
                    name=f"{class_name}.{handle.name}",
                )
            else:
                handle.invoke(instance)
        except Exception as e:
            error = e

        duration_ms = int((time.monotonic() - start_time) * 1000)
        return Invocation(error=error, duration_ms=duration_ms)

    def _invoke_fixtures(
        self,
        instance: Any,
        handles: list[MethodHandle],
        test_class: type,
        phase: LifecyclePhase,
        report: ClassReport,
    ) -> None:
        for handle in handles:
            try:
                handle.invoke(instance)
            except Exception as e:
                raise ClassRunError(
                    test_class,
                    phase,
                    e,
                    method_name=handle.name,
                    results=list(report.results),
                ) from e
