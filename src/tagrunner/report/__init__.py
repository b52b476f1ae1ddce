"""Outcome reporting."""

from tagrunner.report.base import CollectingReporter, CompositeReporter, Reporter
from tagrunner.report.console import ConsoleReporter

__all__ = ["CollectingReporter", "CompositeReporter", "ConsoleReporter", "Reporter"]
