#!/usr/bin/env python3
"""stackctl CLI - local development and deployment workflows."""
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from stackctl.cli_cluster_commands import register_cluster_commands
from stackctl.cli_docker_commands import register_docker_commands
from stackctl.cli_docs_commands import register_docs_commands
from stackctl.cli_support import handle_cli_error
from stackctl.cli_utility_commands import register_utility_commands
from stackctl.core.config import StackConfig, set_config
from stackctl.core.errors import StackctlError
from stackctl.core.logger import get_logger, setup_logging

app = typer.Typer(
    name="stackctl",
    help="""stackctl - Build, run and ship the project with docker, helm, tilt and mkdocs

Quick start:
  stackctl docker build jdk17     # Build the image
  stackctl docker start           # Start the compose stack
  stackctl helm dev               # Lint and package the chart
  stackctl docs serve             # Preview the documentation

More commands: stackctl targets
""",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.callback()
def main(
    project_dir: Optional[Path] = typer.Option(
        None, "--project-dir", "-C", help="Project root (default: $STACKCTL_PROJECT_DIR or current directory)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print commands instead of running them"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Resolve configuration shared by every command."""
    setup_logging(log_file=log_file, verbose=verbose)

    try:
        config = StackConfig.from_env(project_dir=project_dir)
    except StackctlError as e:
        handle_cli_error(e, console, verbose=verbose, exit_code=e.exit_code)

    if dry_run:
        config.dry_run = True
    set_config(config)


# Attach modular subcommands
register_docker_commands(app, console)
register_cluster_commands(app, console)
register_docs_commands(app, console)
register_utility_commands(app, console)

if __name__ == "__main__":
    app()
