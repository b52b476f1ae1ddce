"""Command-line interface for TagRunner."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from tagrunner import __version__
from tagrunner.config import RunnerConfig, create_example_config, get_default_config, load_class
from tagrunner.errors import ConfigurationError, TagRunnerError


console = Console()


def print_banner() -> None:
    """Print the TagRunner banner."""
    console.print(
        Panel.fit(
            "[bold blue]TagRunner[/bold blue] - tag-driven test execution",
            subtitle=f"v{__version__}",
        )
    )


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> None:
    """Configure the root logger for a CLI run."""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=log_format,
        handlers=handlers,
        force=True,
    )


def _load_config(config_path: Optional[str]) -> RunnerConfig:
    if config_path:
        return RunnerConfig.from_file(config_path)
    try:
        return RunnerConfig.find_and_load()
    except FileNotFoundError:
        return get_default_config()


@click.group()
@click.version_option(version=__version__, prog_name="tagrunner")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False),
    help="Path to configuration file (default: tagrunner.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """TagRunner - run tagged test classes with lifecycle hooks and timeouts."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="tagrunner.json",
    help="Output path for configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
@click.pass_context
def init(ctx: click.Context, output: str, force: bool) -> None:
    """Initialize a new TagRunner configuration file."""
    print_banner()

    output_path = Path(output)
    if output_path.exists() and not force:
        console.print(
            f"[yellow]Configuration file already exists:[/yellow] {output_path}"
        )
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        create_example_config(output_path)
        console.print(f"[green]Created configuration file:[/green] {output_path}")
        console.print("\nNext steps:")
        console.print("  1. List your test classes under run.classes")
        console.print("  2. Run [bold]tagrunner run[/bold] to execute them")
    except OSError as e:
        console.print(f"[red]Error creating configuration:[/red] {e}")
        sys.exit(1)


@main.command()
@click.argument("class_paths", nargs=-1)
@click.option(
    "--report/--no-report",
    default=None,
    help="Generate HTML report after tests (default: from config)",
)
@click.option(
    "--fail-fast/--no-fail-fast",
    default=None,
    help="Stop at the first aborted class (default: from config)",
)
@click.pass_context
def run(
    ctx: click.Context,
    class_paths: tuple[str, ...],
    report: Optional[bool],
    fail_fast: Optional[bool],
) -> None:
    """Run test classes given as 'module:ClassName' (default: from config)."""
    print_banner()

    config_path = ctx.obj.get("config_path")
    verbose = ctx.obj.get("verbose", False)

    try:
        config = _load_config(config_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)

    log_file = Path(config.logging.file) if config.logging.file else None
    setup_logging("DEBUG" if verbose else config.logging.level, log_file)

    if fail_fast is not None:
        config.run.fail_fast = fail_fast
    if report is not None:
        config.report.enabled = report

    # Current directory importable so that local test modules resolve
    if str(Path.cwd()) not in sys.path:
        sys.path.insert(0, str(Path.cwd()))

    from tagrunner.core.runner import Registry
    from tagrunner.report.console import ConsoleReporter

    try:
        if class_paths:
            test_classes = [load_class(path) for path in class_paths]
        else:
            test_classes = config.load_classes()
    except ConfigurationError as e:
        console.print(f"[red]Error loading test classes:[/red] {e}")
        sys.exit(1)

    if not test_classes:
        console.print("[yellow]No test classes registered[/yellow]")

    registry = Registry(
        reporter=ConsoleReporter(console),
        fail_fast=config.run.fail_fast,
        raise_on_error=config.run.raise_on_error,
    )
    registry.register(*test_classes)

    try:
        summary = registry.run()
    except TagRunnerError as e:
        console.print(f"[red]Run aborted:[/red] {e}")
        sys.exit(1)

    if config.report.enabled:
        from tagrunner.report.generator import ReportGenerator

        base_dir = Path(config_path).parent if config_path else Path.cwd()
        try:
            report_path = ReportGenerator(config, base_dir).generate(summary)
            console.print(f"[green]Report generated:[/green] {report_path}")
        except OSError as e:
            console.print(f"[red]Error generating report:[/red] {e}")

    if not summary.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
