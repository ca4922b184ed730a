"""Documentation site commands for stackctl CLI."""
from __future__ import annotations

import typer
from rich.console import Console

from stackctl.cli_support import get_orchestrator, print_success, run_operation

docs_app = typer.Typer(help="Build, serve and publish the documentation site", add_completion=False)
_DOCS_APP_ATTACHED = False
console = Console()

VENV_HELP = "Install requirements into a fresh virtual environment first"


def register_docs_commands(app: typer.Typer, shared_console: Console) -> None:
    """Attach docs subcommands to the main Typer app."""
    global console, _DOCS_APP_ATTACHED
    console = shared_console

    if not _DOCS_APP_ATTACHED:
        app.add_typer(docs_app, name="docs")
        _DOCS_APP_ATTACHED = True


@docs_app.command("build")
def docs_build(
    venv: bool = typer.Option(False, "--venv", help=VENV_HELP),
) -> None:
    """Install docs requirements and build the site with mkdocs."""
    run_operation(console, get_orchestrator().build_docs, venv=venv)
    print_success(console, "Documentation build finished")


@docs_app.command("serve")
def docs_serve(
    venv: bool = typer.Option(False, "--venv", help=VENV_HELP),
) -> None:
    """Build the site, then serve it locally with live reload."""
    run_operation(console, get_orchestrator().serve_docs, venv=venv)


@docs_app.command("deploy")
def docs_deploy(
    allow_dirty: bool = typer.Option(False, "--allow-dirty", help="Deploy even with uncommitted changes"),
) -> None:
    """Publish the site to the gh-pages branch.

    Refuses to run with uncommitted changes unless --allow-dirty is given.
    """
    run_operation(console, get_orchestrator().deploy_docs, require_clean=not allow_dirty)
    print_success(console, "GitHub pages generated")
