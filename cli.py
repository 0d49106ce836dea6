#!/usr/bin/env python3
"""
Entrybook CLI.

Entry point for local operations. Use --service to select what to run.

Usage:
    python cli.py --help
    python cli.py --service info
    python cli.py --service config
    python cli.py --service init-db --verbose
    python cli.py --service render --file todo.md --mode auto --category todo
    python cli.py --service test --test-type unit
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import click

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from entrybook.backend.core.logging import get_logger, log_with_source, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["info", "config", "render", "init-db", "test"]),
    default="info",
    help="Service or command to run.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--file", "-f", "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Markdown file to render (render only). Reads stdin when omitted.",
)
@click.option(
    "--mode",
    type=click.Choice(["force", "auto", "none"]),
    default="auto",
    help="Checklist mode (render only).",
)
@click.option(
    "--category",
    type=click.Choice(["note", "todo", "read_later"]),
    default="note",
    help="Entry type used by --mode auto (render only).",
)
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test type to run.",
)
def main(
    service: str,
    verbose: bool,
    debug: bool,
    file_path: Path | None,
    mode: str,
    category: str,
    test_type: str,
) -> None:
    """
    Entrybook CLI.

    \b
    Examples:
        python cli.py --service info
        python cli.py --service config
        python cli.py --service init-db --verbose
        python cli.py --service render --file todo.md --mode force
        python cli.py --service test --test-type unit
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")

    logger = get_logger(__name__)

    log_with_source(logger, "cli", "debug", "CLI invoked", service=service, log_level=log_level)

    if service == "info":
        show_info(logger)
    elif service == "config":
        show_config(logger)
    elif service == "render":
        render_body(logger, file_path, mode, category)
    elif service == "init-db":
        init_db(logger)
    elif service == "test":
        run_tests(logger, test_type)


def render_body(logger, file_path: Path | None, mode: str, category: str) -> None:
    """Render a markdown body to HTML the way entry bodies are displayed."""
    from entrybook.backend.core.config import get_app_config
    from entrybook.backend.models.entry import Category
    from entrybook.backend.rendering.checklist import ChecklistMode, ChecklistRenderer

    text = file_path.read_text(encoding="utf-8") if file_path else click.get_text_stream("stdin").read()

    rendering = get_app_config().entries.rendering
    renderer = ChecklistRenderer(extensions=rendering.extensions, strict=rendering.strict_checklist)
    html = renderer.render(text, ChecklistMode(mode), Category[category.upper()])

    log_with_source(logger, "cli", "debug", "Body rendered", mode=mode, category=category, chars=len(html))
    click.echo(html)


def init_db(logger) -> None:
    """Create the entry tables in the configured database."""
    from entrybook.backend.core.config import get_database_url
    from entrybook.backend.core.database import create_all

    try:
        asyncio.run(create_all())
    except Exception as e:
        log_with_source(logger, "cli", "error", "Database initialization failed", error=str(e))
        click.echo(click.style(f"Error initializing database: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Tables created at {get_database_url()}")


def show_config(logger) -> None:
    """Display loaded configuration."""
    click.echo("Application Configuration:\n")

    try:
        from entrybook.backend.core.config import get_app_config

        app_config = get_app_config()
        sections = {
            "Application": app_config.application,
            "Database": app_config.database,
            "Logging": app_config.logging,
            "Security": app_config.security,
            "Entries": app_config.entries,
        }
        for title, section in sections.items():
            click.echo(f"{title} Settings (from YAML):")
            click.echo("-" * 40)
            _echo_mapping(section.model_dump())
            click.echo()

        log_with_source(logger, "cli", "info", "Configuration displayed successfully")

    except Exception as e:
        log_with_source(logger, "cli", "error", "Failed to load configuration", error=str(e))
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def _echo_mapping(values: dict, indent: int = 2) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_mapping(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def run_tests(logger, test_type: str) -> None:
    """Run the test suite."""
    log_with_source(logger, "cli", "info", "Running tests", test_type=test_type)

    cmd = [sys.executable, "-m", "pytest"]

    if test_type == "unit":
        cmd.append("tests/unit")
    elif test_type == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests/")

    cmd.append("-v")

    click.echo(f"Running: {' '.join(cmd)}\n")

    try:
        result = subprocess.run(cmd)
        sys.exit(result.returncode)
    except FileNotFoundError:
        log_with_source(logger, "cli", "error", "pytest not found. Install with: pip install pytest")
        sys.exit(1)


def show_info(logger) -> None:
    """Display application information."""
    try:
        from entrybook.backend.core.config import get_app_config
        app_config = get_app_config()
        click.echo(app_config.application.name)
        click.echo("=" * 40)
        click.echo(f"Version: {app_config.application.version}")
        click.echo(f"Description: {app_config.application.description}")
    except Exception as e:
        log_with_source(logger, "cli", "error", "Failed to load application configuration", error=str(e))
        click.echo(
            click.style(
                "Error: Could not load application.yaml configuration.",
                fg="red",
            ),
            err=True,
        )
        sys.exit(1)

    click.echo()
    click.echo("Services (--service):")
    click.echo("  info           Show this information")
    click.echo("  config         Display configuration")
    click.echo("  render         Render a markdown body to HTML")
    click.echo("  init-db        Create database tables")
    click.echo("  test           Run test suite")
    click.echo()
    click.echo("Options:")
    click.echo("  --verbose, -v  Enable INFO level logging")
    click.echo("  --debug, -d    Enable DEBUG level logging")

    log_with_source(logger, "cli", "debug", "Info displayed")


if __name__ == "__main__":
    main()
