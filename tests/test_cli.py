"""Tests for the command-line interface."""

import json
import logging
import textwrap
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from tagrunner.cli import main, setup_logging

SUITE_SOURCE = textwrap.dedent(
    """
    from tagrunner import annotations as tags
    from tagrunner.assertions import assert_equals


    class Passing:
        @tags.test
        def works(self):
            assert_equals(1, 1)


    class Failing:
        @tags.test
        def wrong(self):
            assert_equals("5", "4")


    class Broken:
        @tags.before_all
        def start(self):
            raise RuntimeError("cannot start")

        @tags.test
        def never(self):
            pass
    """
)


@pytest.fixture
def suite_module(tmp_path, monkeypatch, request):
    """Write an importable test-class module and chdir next to it."""
    module_name = f"cli_suite_{request.node.name}"
    (tmp_path / f"{module_name}.py").write_text(SUITE_SOURCE)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return module_name


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("tagrunner.cli.setup_logging") as mock_setup:
        yield mock_setup


class TestInit:
    """Tests for the init command."""

    def test_creates_config(self, tmp_path):
        """Test writing an example configuration."""
        output = tmp_path / "tagrunner.json"

        result = CliRunner().invoke(main, ["init", "--output", str(output)])

        assert result.exit_code == 0
        assert "run" in json.loads(output.read_text())

    def test_refuses_to_overwrite(self, tmp_path):
        """Test that an existing file needs --force."""
        output = tmp_path / "tagrunner.json"
        output.write_text("{}")

        result = CliRunner().invoke(main, ["init", "--output", str(output)])

        assert result.exit_code == 1
        assert output.read_text() == "{}"

    def test_force_overwrites(self, tmp_path):
        """Test --force."""
        output = tmp_path / "tagrunner.json"
        output.write_text("{}")

        result = CliRunner().invoke(main, ["init", "--output", str(output), "--force"])

        assert result.exit_code == 0
        assert "project" in json.loads(output.read_text())


class TestRunCommand:
    """Tests for the run command."""

    def test_passing_class(self, suite_module):
        """Test a fully passing run exits cleanly."""
        result = CliRunner().invoke(main, ["run", f"{suite_module}:Passing"])

        assert result.exit_code == 0
        assert "is successful" in result.output

    def test_failing_class(self, suite_module):
        """Test that a failing test sets a non-zero exit code."""
        result = CliRunner().invoke(main, ["run", f"{suite_module}:Failing"])

        assert result.exit_code == 1
        assert "is failed" in result.output

    def test_unknown_class(self, suite_module):
        """Test that a bad class path is reported."""
        result = CliRunner().invoke(main, ["run", f"{suite_module}:Missing"])

        assert result.exit_code == 1
        assert "Error loading test classes" in result.output

    def test_classes_from_config(self, suite_module, tmp_path):
        """Test running the classes listed in the config file."""
        config_path = tmp_path / "tagrunner.json"
        config_path.write_text(json.dumps({"run": {"classes": [f"{suite_module}:Passing"]}}))

        result = CliRunner().invoke(main, ["--config", str(config_path), "run"])

        assert result.exit_code == 0
        assert "is successful" in result.output

    def test_invalid_config(self, suite_module, tmp_path):
        """Test that a malformed config is reported."""
        config_path = tmp_path / "tagrunner.json"
        config_path.write_text(json.dumps({"run": {"classes": ["no-colon"]}}))

        result = CliRunner().invoke(main, ["--config", str(config_path), "run"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_report_written(self, suite_module, tmp_path):
        """Test --report writes the HTML report."""
        result = CliRunner().invoke(main, ["run", "--report", f"{suite_module}:Passing"])

        assert result.exit_code == 0
        assert (tmp_path / "reports" / "test_report.html").exists()

    def test_no_classes(self, suite_module):
        """Test that an empty run succeeds."""
        result = CliRunner().invoke(main, ["run"])

        assert result.exit_code == 0
        assert "No test classes registered" in result.output

    def test_aborted_class_does_not_stop_run(self, suite_module):
        """Test that later classes still run after an aborted one."""
        result = CliRunner().invoke(
            main, ["run", f"{suite_module}:Broken", f"{suite_module}:Passing"]
        )

        assert result.exit_code == 1
        assert "Aborted:" in result.output
        assert "is successful" in result.output
        assert "Run aborted" not in result.output

    def test_raise_on_error_from_config(self, suite_module, tmp_path):
        """Test that run.raise_on_error in the config reaches the registry."""
        config_path = tmp_path / "tagrunner.json"
        config_path.write_text(
            json.dumps(
                {
                    "run": {
                        "classes": [f"{suite_module}:Broken", f"{suite_module}:Passing"],
                        "raise_on_error": True,
                    }
                }
            )
        )

        result = CliRunner().invoke(main, ["--config", str(config_path), "run"])

        assert result.exit_code == 1
        assert "is successful" in result.output
        assert "Run aborted" in result.output

    def test_fail_fast_stops_at_first_aborted_class(self, suite_module):
        """Test --fail-fast skips the classes after an aborted one."""
        result = CliRunner().invoke(
            main, ["run", "--fail-fast", f"{suite_module}:Broken", f"{suite_module}:Passing"]
        )

        assert result.exit_code == 1
        assert "Run aborted" in result.output
        assert "is successful" not in result.output

    def test_no_fail_fast_overrides_config(self, suite_module, tmp_path):
        """Test --no-fail-fast wins over run.fail_fast in the config."""
        config_path = tmp_path / "tagrunner.json"
        config_path.write_text(json.dumps({"run": {"fail_fast": True}}))

        result = CliRunner().invoke(
            main,
            [
                "--config",
                str(config_path),
                "run",
                "--no-fail-fast",
                f"{suite_module}:Broken",
                f"{suite_module}:Passing",
            ],
        )

        assert result.exit_code == 1
        assert "is successful" in result.output
        assert "Run aborted" not in result.output

    def test_verbose_enables_debug_logging(self, suite_module, no_logging_setup):
        """Test that --verbose switches logging to DEBUG."""
        CliRunner().invoke(main, ["--verbose", "run", f"{suite_module}:Passing"])

        assert no_logging_setup.call_args.args[0] == "DEBUG"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_writes_log_file(self, tmp_path):
        """Test that a file handler is attached."""
        log_file = tmp_path / "logs" / "tagrunner.log"
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level

        try:
            setup_logging("INFO", log_file)
            logging.getLogger("tagrunner.test").info("hello log")
            for handler in root.handlers:
                handler.flush()
            assert "hello log" in log_file.read_text()
        finally:
            for handler in root.handlers:
                if handler not in saved_handlers:
                    handler.close()
            root.handlers = saved_handlers
            root.setLevel(saved_level)
