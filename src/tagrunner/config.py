"""Configuration management for TagRunner."""

import importlib
import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from tagrunner.errors import ConfigurationError


class ProjectConfig(BaseModel):
    """Project identification and metadata."""

    name: str = Field(default="my-project", description="Project name shown in reports")
    description: str = Field(default="", description="Brief description of the test suite")


class RunConfig(BaseModel):
    """Which classes to run and how fatal errors are handled."""

    classes: list[str] = Field(
        default_factory=list,
        description="Test classes to register, as 'package.module:ClassName'",
    )
    fail_fast: bool = Field(default=False, description="Stop the run at the first aborted class")
    raise_on_error: bool = Field(
        default=False, description="Raise after the run if any class aborted"
    )

    @field_validator("classes")
    @classmethod
    def validate_classes(cls, v: list[str]) -> list[str]:
        for path in v:
            module, sep, name = path.partition(":")
            if not sep or not module.strip() or not name.strip():
                raise ValueError(f"Class path must look like 'module:ClassName', got {path!r}")
        return v


class ReportConfig(BaseModel):
    """HTML report configuration."""

    enabled: bool = Field(default=False, description="Write an HTML report after the run")
    output_dir: str = Field(default="./reports", description="Directory for report output")
    filename: str = Field(default="test_report.html", description="Report filename")
    title: str = Field(default="Test Results", description="Report title")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="WARNING", description="Log level for the tagrunner loggers")
    file: Optional[str] = Field(default=None, description="Optional log file path")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class RunnerConfig(BaseModel):
    """Main configuration for TagRunner."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    run: RunConfig = Field(default_factory=RunConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "RunnerConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "RunnerConfig":
        """Find and load configuration file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        config_names = ["tagrunner.json", ".tagrunner.json"]

        current = start_dir.resolve()
        while True:
            for name in config_names:
                config_path = current / name
                if config_path.exists():
                    return cls.from_file(config_path)
            if current == current.parent:
                break
            current = current.parent

        raise FileNotFoundError(
            "No configuration file found. Create tagrunner.json or run 'tagrunner init'"
        )

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)

    def load_classes(self) -> list[type]:
        """Import the configured test classes.

        Raises:
            ConfigurationError: If a module or class cannot be found
        """
        return [load_class(path) for path in self.run.classes]

    def get_report_path(self, base_dir: Path | str | None = None) -> Path:
        """Get the absolute path of the HTML report."""
        if base_dir is None:
            base_dir = Path.cwd()
        else:
            base_dir = Path(base_dir)

        return (base_dir / self.report.output_dir / self.report.filename).resolve()


def load_class(path: str) -> type:
    """Import a class given as 'package.module:ClassName'."""
    module_name, sep, class_name = path.partition(":")
    if not sep:
        raise ConfigurationError(f"Class path must look like 'module:ClassName', got {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import module {module_name!r}: {e}") from e

    target = module
    for part in class_name.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ConfigurationError(f"{module_name!r} has no attribute {class_name!r}") from e

    if not isinstance(target, type):
        raise ConfigurationError(f"{path!r} is not a class")
    return target


def get_default_config() -> RunnerConfig:
    """Return a default configuration."""
    return RunnerConfig(
        project=ProjectConfig(name="my-project"),
        run=RunConfig(classes=[]),
    )


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config()
    config.project.description = "Brief description of your test suite"
    config.run.classes = ["tests.example:ExampleTests"]
    config.to_file(output_path)
    return output_path
