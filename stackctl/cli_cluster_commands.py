"""Helm chart and tilt development cluster commands for stackctl CLI."""
from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from stackctl.cli_support import get_orchestrator, print_success, run_operation

helm_app = typer.Typer(help="Lint, package and install the helm chart", add_completion=False)
tilt_app = typer.Typer(help="Run the tilt development cluster", add_completion=False)
_CLUSTER_APPS_ATTACHED = False
console = Console()


def register_cluster_commands(app: typer.Typer, shared_console: Console) -> None:
    """Attach helm and tilt subcommands to the main Typer app."""
    global console, _CLUSTER_APPS_ATTACHED
    console = shared_console

    if not _CLUSTER_APPS_ATTACHED:
        app.add_typer(helm_app, name="helm")
        app.add_typer(tilt_app, name="tilt")
        _CLUSTER_APPS_ATTACHED = True


@helm_app.command("lint")
def helm_lint() -> None:
    """Lint the chart against charts/values.yaml."""
    run_operation(console, get_orchestrator().lint_chart)


@helm_app.command("package")
def helm_package(
    version: Optional[str] = typer.Option(None, "--version", help="App version to stamp into the chart"),
    allow_dirty: bool = typer.Option(False, "--allow-dirty", help="Package even with uncommitted changes"),
) -> None:
    """Package the chart into the release directory.

    Refuses to run with uncommitted changes unless --allow-dirty is given.
    """
    destination = run_operation(
        console,
        get_orchestrator().package_chart,
        app_version=version,
        require_clean=not allow_dirty,
    )
    print_success(console, f"Chart packaged to {destination}")


@helm_app.command("dev")
def helm_dev(
    version: Optional[str] = typer.Option(None, "--version", help="App version to stamp into the chart"),
    allow_dirty: bool = typer.Option(False, "--allow-dirty", help="Run even with uncommitted changes"),
) -> None:
    """Clean, lint and package the chart in one go.

    Refuses to run with uncommitted changes unless --allow-dirty is given.
    """
    destination = run_operation(
        console,
        get_orchestrator().chart_dev,
        app_version=version,
        require_clean=not allow_dirty,
    )
    print_success(console, f"Chart packaged to {destination}")


@helm_app.command("start")
def helm_start() -> None:
    """Install or upgrade the release on the current Kubernetes context."""
    run_operation(console, get_orchestrator().install_release)


@helm_app.command("stop")
def helm_stop() -> None:
    """Uninstall the release."""
    run_operation(console, get_orchestrator().uninstall_release)


@tilt_app.command("start")
def tilt_start() -> None:
    """Start the development cluster (tilt up)."""
    run_operation(console, get_orchestrator().tilt_up)


@tilt_app.command("stop")
def tilt_stop() -> None:
    """Stop the development cluster and delete its namespaces."""
    run_operation(console, get_orchestrator().tilt_down)
