"""Registration and sequential execution of test classes."""

import logging
from datetime import datetime
from typing import Iterable, Optional

from tagrunner.config import RunnerConfig
from tagrunner.core.executor import LifecycleExecutor
from tagrunner.errors import ClassRunError, RunAbortedError
from tagrunner.models import ClassReport, RunSummary
from tagrunner.report.base import CollectingReporter, Reporter

logger = logging.getLogger(__name__)


class Registry:
    """Accumulates test classes and runs them in registration order."""

    def __init__(
        self,
        reporter: Optional[Reporter] = None,
        fail_fast: bool = False,
        raise_on_error: bool = False,
        executor: Optional[LifecycleExecutor] = None,
    ):
        """Initialize the registry.

        Args:
            reporter: Receives outcomes (default: an in-memory CollectingReporter)
            fail_fast: Propagate the first class abort instead of moving on
            raise_on_error: Raise RunAbortedError after the run if any class aborted
            executor: Runs each class (default: LifecycleExecutor(reporter))
        """
        self.reporter = reporter or CollectingReporter()
        self.fail_fast = fail_fast
        self.raise_on_error = raise_on_error
        self.executor = executor or LifecycleExecutor(self.reporter)
        self._classes: list[type] = []

    @classmethod
    def from_config(cls, config: RunnerConfig, reporter: Optional[Reporter] = None) -> "Registry":
        """Create a registry with the configured policy and classes."""
        registry = cls(
            reporter=reporter,
            fail_fast=config.run.fail_fast,
            raise_on_error=config.run.raise_on_error,
        )
        registry.register(*config.load_classes())
        return registry

    @property
    def classes(self) -> list[type]:
        return list(self._classes)

    def register(self, *test_classes: type) -> "Registry":
        """Register one or more test classes.

        Constructibility is only checked when the class runs.
        """
        self._classes.extend(test_classes)
        return self

    def register_all(self, test_classes: Iterable[type]) -> "Registry":
        return self.register(*test_classes)

    def run(self) -> RunSummary:
        """Run every registered class in registration order.

        Returns:
            RunSummary with one ClassReport per class, aborted ones included

        Raises:
            ClassRunError: On the first abort when fail_fast is set
            RunAbortedError: After the run when raise_on_error is set and
                any class aborted
        """
        classes = list(self._classes)
        summary = RunSummary(started_at=datetime.now())
        self.reporter.run_started(classes)

        for test_class in classes:
            try:
                class_report = self.executor.run_class(test_class)
            except ClassRunError as e:
                logger.error(str(e))
                self.reporter.class_aborted(e)
                if self.fail_fast:
                    raise
                class_report = ClassReport(
                    class_name=e.class_name,
                    results=list(e.results),
                    error=e,
                )
            summary.classes.append(class_report)

        summary.finished_at = datetime.now()
        self.reporter.run_finished(summary)

        if self.raise_on_error and summary.errors:
            raise RunAbortedError(summary.errors)

        return summary
