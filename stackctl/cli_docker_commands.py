"""Container image and compose stack commands for stackctl CLI."""
from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from stackctl.cli_support import get_orchestrator, print_success, run_operation

docker_app = typer.Typer(help="Build images and manage the local compose stack", add_completion=False)
_DOCKER_APP_ATTACHED = False
console = Console()


def register_docker_commands(app: typer.Typer, shared_console: Console) -> None:
    """Attach docker subcommands to the main Typer app."""
    global console, _DOCKER_APP_ATTACHED
    console = shared_console

    if not _DOCKER_APP_ATTACHED:
        app.add_typer(docker_app, name="docker")
        _DOCKER_APP_ATTACHED = True


@docker_app.command("build")
def docker_build(
    docker_tag: Optional[str] = typer.Argument(
        None, help="Dockerfile flavour under distribution/docker-images (default: $DOCKER_TAG)"
    ),
) -> None:
    """Build the project image, tagged with IMAGE_TAG and the git revision.

    Examples:
        stackctl docker build jdk17
        DOCKER_TAG=jdk17 IMAGE_TAG=dev stackctl docker build
    """
    orchestrator = get_orchestrator()
    images = run_operation(console, orchestrator.build_image, docker_tag)
    print_success(console, f"Built {', '.join(images)}")


@docker_app.command("start")
def docker_start() -> None:
    """Start the compose stack in the background."""
    run_operation(console, get_orchestrator().start_stack)


@docker_app.command("stop")
def docker_stop() -> None:
    """Stop the compose stack and remove its containers."""
    run_operation(console, get_orchestrator().stop_stack)


@docker_app.command("status")
def docker_status() -> None:
    """Show the status of the compose stack containers."""
    run_operation(console, get_orchestrator().status)


@docker_app.command("okteto")
def docker_okteto() -> None:
    """Build the docker and okteto images with okteto."""
    images = run_operation(console, get_orchestrator().okteto_build)
    print_success(console, f"Built {', '.join(images)}")
