"""Report generation using Jinja2 templates."""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from tagrunner.config import RunnerConfig
from tagrunner.models import OutcomeStatus, RunSummary


class ReportGenerator:
    """Generates static HTML reports from a run summary."""

    def __init__(self, config: RunnerConfig, base_dir: Optional[Path] = None):
        """Initialize the report generator.

        Args:
            config: TagRunner configuration
            base_dir: Directory the report output_dir is relative to
        """
        self.config = config
        self.base_dir = base_dir or Path.cwd()

        template_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

        self.env.filters["duration_format"] = self._format_duration
        self.env.filters["datetime_format"] = self._format_datetime
        self.env.filters["percentage"] = self._format_percentage

    def render(self, summary: RunSummary) -> str:
        """Render the report to an HTML string."""
        template = self.env.get_template("report.html")
        return template.render(**self._prepare_context(summary))

    def generate(self, summary: RunSummary) -> Path:
        """Write the HTML report.

        Returns:
            Path to the generated report file
        """
        report_path = self.config.get_report_path(self.base_dir)
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(self.render(summary), encoding="utf-8")
        return report_path

    def _prepare_context(self, summary: RunSummary) -> dict[str, Any]:
        """Prepare context for template rendering."""
        data = summary.to_dict()
        total = data["total"]
        pass_rate = (data["passed"] / total * 100) if total > 0 else 0

        failed_tests = [
            r.to_dict() for r in summary.results if not r.outcome.passed
        ]
        failed_tests.sort(key=lambda t: t.get("duration_ms", 0), reverse=True)

        return {
            "title": self.config.report.title,
            "project_name": self.config.project.name,
            "generated_at": datetime.now(),
            "started_at": summary.started_at,
            "total": total,
            "passed": data["passed"],
            "failed": data["failed"],
            "assertion_failures": summary.count(OutcomeStatus.ASSERTION_FAILURE),
            "timeouts": summary.count(OutcomeStatus.TIMEOUT_FAILURE),
            "errors": summary.count(OutcomeStatus.UNHANDLED_ERROR),
            "pass_rate": pass_rate,
            "duration_ms": data["duration_ms"],
            "classes": data["classes"],
            "failed_tests": failed_tests,
            "aborted": [e.to_dict() for e in summary.errors],
        }

    @staticmethod
    def _format_duration(ms: int) -> str:
        """Format duration in milliseconds to human-readable string."""
        if ms < 1000:
            return f"{ms}ms"
        elif ms < 60000:
            return f"{ms / 1000:.2f}s"
        else:
            minutes = ms // 60000
            seconds = (ms % 60000) / 1000
            return f"{minutes}m {seconds:.1f}s"

    @staticmethod
    def _format_datetime(dt: Any) -> str:
        """Format datetime object or string."""
        if isinstance(dt, str):
            try:
                dt = datetime.fromisoformat(dt)
            except ValueError:
                return dt

        if isinstance(dt, datetime):
            return dt.strftime("%Y-%m-%d %H:%M:%S")

        return str(dt)

    @staticmethod
    def _format_percentage(value: float) -> str:
        return f"{value:.1f}%"
