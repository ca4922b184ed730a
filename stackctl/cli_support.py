"""Shared utilities for stackctl CLI modules."""
from __future__ import annotations

from typing import Any, Callable

import typer
from rich.console import Console

from stackctl.core.config import get_config
from stackctl.core.errors import StackctlError, WorkspaceNotClean
from stackctl.core.orchestrator import Orchestrator


def get_orchestrator() -> Orchestrator:
    """Return an Orchestrator for the active configuration."""
    return Orchestrator(get_config())


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Exit code to use
    """
    print_error(console, str(e), prefix="Error:")
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def run_operation(
    console: Console,
    operation: Callable[..., Any],
    *args: Any,
    **kwargs: Any,
) -> Any:
    """Run an orchestrator operation, turning stackctl errors into exit codes.

    UpstreamToolFailure exits with the tool's own code; precondition
    failures exit with code 2. Uncommitted changes are listed first.
    """
    try:
        return operation(*args, **kwargs)
    except WorkspaceNotClean as e:
        for line in e.changes:
            print_warning(console, line.strip())
        handle_cli_error(e, console, exit_code=e.exit_code)
    except StackctlError as e:
        handle_cli_error(e, console, exit_code=e.exit_code)


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    """Print success message with consistent formatting.

    Args:
        console: Rich console for output
        message: Success message
        prefix: Prefix symbol (default: ✓)
    """
    console.print(f"[green]{prefix}[/green] {message}")


def print_error(console: Console, message: str, prefix: str = "✗") -> None:
    """Print error message with consistent formatting.

    Args:
        console: Rich console for output
        message: Error message
        prefix: Prefix symbol (default: ✗)
    """
    console.print(f"[red]{prefix}[/red] {message}")


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    """Print warning message with consistent formatting.

    Args:
        console: Rich console for output
        message: Warning message
        prefix: Prefix symbol (default: ⚠)
    """
    console.print(f"[yellow]{prefix}[/yellow] {message}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    """Print info message with consistent formatting.

    Args:
        console: Rich console for output
        message: Info message
        prefix: Prefix symbol (default: ℹ)
    """
    console.print(f"[cyan]{prefix}[/cyan] {message}")
