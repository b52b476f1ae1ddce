"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from tagrunner.errors import ClassRunError
from tagrunner.models import ClassReport, MethodReport, Outcome, RunSummary


class Reporter(ABC):
    """Abstract base class for outcome reporters.

    Only `test_finished` is required; the other hooks default to no-ops.
    """

    def run_started(self, test_classes: list[type]) -> None:
        pass

    def class_started(self, test_class: type) -> None:
        pass

    @abstractmethod
    def test_finished(self, report: MethodReport) -> None:
        """Receive the outcome of one test method.

        Args:
            report: Method name, optional description and classified outcome
        """
        pass

    def class_finished(self, report: ClassReport) -> None:
        pass

    def class_aborted(self, error: ClassRunError) -> None:
        pass

    def run_finished(self, summary: RunSummary) -> None:
        pass


class CollectingReporter(Reporter):
    """Keeps every report in memory."""

    def __init__(self) -> None:
        self.reports: list[MethodReport] = []
        self.aborted: list[ClassRunError] = []
        self.summary: Optional[RunSummary] = None

    def test_finished(self, report: MethodReport) -> None:
        self.reports.append(report)

    def class_aborted(self, error: ClassRunError) -> None:
        self.aborted.append(error)

    def run_finished(self, summary: RunSummary) -> None:
        self.summary = summary

    def outcome_of(self, method_name: str) -> Outcome:
        """Return the outcome of the first report for a method name."""
        for report in self.reports:
            if report.method_name == method_name:
                return report.outcome
        raise KeyError(method_name)


class CompositeReporter(Reporter):
    """Forwards every hook to several reporters, in order."""

    def __init__(self, reporters: Iterable[Reporter]):
        self.reporters = list(reporters)

    def run_started(self, test_classes: list[type]) -> None:
        for reporter in self.reporters:
            reporter.run_started(test_classes)

    def class_started(self, test_class: type) -> None:
        for reporter in self.reporters:
            reporter.class_started(test_class)

    def test_finished(self, report: MethodReport) -> None:
        for reporter in self.reporters:
            reporter.test_finished(report)

    def class_finished(self, report: ClassReport) -> None:
        for reporter in self.reporters:
            reporter.class_finished(report)

    def class_aborted(self, error: ClassRunError) -> None:
        for reporter in self.reporters:
            reporter.class_aborted(error)

    def run_finished(self, summary: RunSummary) -> None:
        for reporter in self.reporters:
            reporter.run_finished(summary)
