"""Utility CLI commands - deps, all, clean, versions, dirs, targets, version."""
from typing import List, Optional

import typer
from rich.console import Console

from stackctl import __version__
from stackctl.cli_support import get_orchestrator, print_info, print_success, run_operation

# Module-level console instance (will be set by register function)
console: Console = Console()

# Main app, set by register function so `targets` can walk it
_app: Optional[typer.Typer] = None


def _command_name(info) -> str:
    return info.name or info.callback.__name__.lower().replace("_", "-")


def list_targets(app: typer.Typer) -> List[str]:
    """Return every runnable command path of the app, sorted."""
    names = [_command_name(cmd) for cmd in app.registered_commands]
    for group in app.registered_groups:
        for cmd in group.typer_instance.registered_commands:
            names.append(f"{group.name} {_command_name(cmd)}")
    return sorted(names)


def deps():
    """Install web dependencies (npm install)."""
    run_operation(console, get_orchestrator().install_deps)
    print_success(console, "Install finished")


def run_all():
    """Run linting and format tasks (npm run all)."""
    run_operation(console, get_orchestrator().run_all)
    print_success(console, "Build finished")


def clean():
    """Remove temporary directories, packaged charts, built site and venv."""
    removed = run_operation(console, get_orchestrator().clean)
    for path in removed:
        print_info(console, f"Removed {path}")
    print_success(console, "Clean finished")


def versions():
    """Show versions of docker, tilt and helm."""
    run_operation(console, get_orchestrator().versions)
    print_success(console, "Versions list finished")


def dirs():
    """List top-level project directories."""
    for name in run_operation(console, get_orchestrator().directories):
        console.print(name)


def targets():
    """List all stackctl commands."""
    for name in list_targets(_app):
        console.print(name)


def version():
    """Show stackctl version."""
    console.print(f"stackctl v{__version__}")


def register_utility_commands(app: typer.Typer, shared_console: Console):
    """Register utility commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console, _app
    console = shared_console
    _app = app

    # Register commands
    app.command()(deps)
    app.command("all")(run_all)
    app.command()(clean)
    app.command()(versions)
    app.command()(dirs)
    app.command()(targets)
    app.command()(version)
