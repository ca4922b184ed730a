"""Command orchestrator: named workflow operations over external tools.

Each operation is one linear sequence. Tools are resolved and
preconditions checked before the first external process starts; the
first failing command aborts the operation.
"""
import os
from pathlib import Path
from typing import List, Mapping, Optional

from stackctl.core import tools
from stackctl.core.config import StackConfig, require
from stackctl.core.logger import get_logger
from stackctl.core.runner import CommandInvocation, CommandRunner
from stackctl.core.workspace import Workspace

logger = get_logger(__name__)

COMPOSE_FILE = "docker-compose.yml"
DOCKERFILE_DIR = Path("distribution") / "docker-images"
CHART_DIR = "charts"
CHART_VALUES = "charts/values.yaml"
DOCS_REQUIREMENTS = "./docs/requirements.txt"
MKDOCS_CONFIG = "mkdocs.yml"
GH_PAGES_BRANCH = "gh-pages"


class Orchestrator:
    """Runs stackctl operations for one project root."""

    def __init__(
        self,
        config: StackConfig,
        runner: Optional[CommandRunner] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.config = config
        self.root = Path(config.project_dir)
        self.runner = runner or CommandRunner(dry_run=config.dry_run)
        self.environ = environ

    def _resolve(self, tool: tools.ToolReference) -> List[str]:
        environ = self.environ
        if environ is None:
            # Environment over project file; empty values count as unset
            environ = {**self.config.variables, **{k: v for k, v in os.environ.items() if v}}
        return tool.resolve(environ)

    def _invoke(self, argv: List[str]) -> None:
        self.runner.run(CommandInvocation(argv, self.root))

    def _workspace(self) -> Workspace:
        return Workspace(self.root, self._resolve(tools.GIT), self.runner)

    # Container images and the compose stack

    def build_image(self, docker_tag: Optional[str] = None) -> List[str]:
        """Build an image from distribution/docker-images/<tag>.Dockerfile.

        The image is tagged with IMAGE_TAG and with the current git revision.

        Returns:
            The image references that were built
        """
        tag = require(
            "DOCKER_TAG",
            docker_tag or self.config.docker_tag,
            hint="Invoke with `stackctl docker build <tag>` or set DOCKER_TAG.",
        )
        repository = require("IMAGE_REPOSITORY", self.config.image_repository)
        image_tag = require("IMAGE_TAG", self.config.image_tag)
        engine = self._resolve(tools.CONTAINER_ENGINE)
        revision = self._workspace().revision()

        dockerfile = self.root / DOCKERFILE_DIR / f"{tag}.Dockerfile"
        images = [f"{repository}:{image_tag}", f"{repository}:{revision}"]

        logger.info("Rebuilding docker container...")
        argv = [*engine, "build", "--rm", "--file", str(dockerfile)]
        for image in images:
            argv.extend(["--tag", image])
        argv.extend(["--no-cache=true", str(self.root)])
        self._invoke(argv)
        return images

    def _compose(self, *args: str) -> None:
        compose = self._resolve(tools.COMPOSE)
        self._invoke([*compose, "--file", str(self.root / COMPOSE_FILE), *args])

    def start_stack(self) -> None:
        logger.info("Starting docker containers...")
        self._compose("up", "--detach")

    def stop_stack(self) -> None:
        logger.info("Stopping docker containers...")
        self._compose("down")

    def status(self) -> None:
        logger.info("Processing status of docker containers...")
        self._compose("ps")

    def okteto_build(self) -> List[str]:
        """Build the docker and okteto images with okteto."""
        images = [
            require("DOCKER_IMAGE", self.config.docker_image),
            require("OKTETO_IMAGE", self.config.okteto_image),
        ]
        okteto = self._resolve(tools.OKTETO)
        for image in images:
            self._invoke([*okteto, "build", "-t", image, "."])
        return images

    # Kubernetes charts and the development cluster

    def lint_chart(self) -> None:
        helm = self._resolve(tools.HELM)
        self._invoke([*helm, "lint", CHART_DIR, "--values", CHART_VALUES])

    def package_chart(self, app_version: Optional[str] = None, require_clean: bool = True) -> Path:
        """Package the chart into <RELEASE_NAME>/charts.

        Args:
            app_version: Optional app version stamped into the chart
            require_clean: Refuse to package with uncommitted changes

        Returns:
            Directory that receives the packaged chart
        """
        release = require("RELEASE_NAME", self.config.release_name)
        helm = self._resolve(tools.HELM)
        if require_clean:
            self._workspace().ensure_clean()

        destination = f"{release}/charts"
        if not self.runner.dry_run:
            (self.root / destination).mkdir(parents=True, exist_ok=True)

        argv = [*helm, "package", CHART_DIR, "--dependency-update", "--destination", destination]
        if app_version:
            argv.extend(["--app-version", app_version])
        self._invoke(argv)
        return self.root / destination

    def chart_dev(self, app_version: Optional[str] = None, require_clean: bool = True) -> Path:
        """Clean artifacts, lint the chart, then package it.

        The workspace check runs before anything is removed.
        """
        self._resolve(tools.HELM)
        if require_clean:
            self._workspace().ensure_clean()
        self.clean()
        self.lint_chart()
        return self.package_chart(app_version=app_version, require_clean=False)

    def install_release(self) -> None:
        name = require("CLUSTER_NAME", self.config.cluster_name)
        namespace = require("CLUSTER_NAMESPACE", self.config.cluster_namespace)
        helm = self._resolve(tools.HELM)
        self._invoke([
            *helm, "upgrade", "--install", name,
            "-f", CHART_VALUES,
            "--create-namespace", "--namespace", namespace,
            CHART_DIR,
        ])

    def uninstall_release(self) -> None:
        name = require("CLUSTER_NAME", self.config.cluster_name)
        namespace = require("CLUSTER_NAMESPACE", self.config.cluster_namespace)
        helm = self._resolve(tools.HELM)
        self._invoke([*helm, "uninstall", name, "--namespace", namespace])

    def tilt_up(self) -> None:
        self._invoke([*self._resolve(tools.TILT), "up"])

    def tilt_down(self) -> None:
        self._invoke([*self._resolve(tools.TILT), "down", "--delete-namespaces"])

    # Documentation site

    def _docs_python(self, venv: bool) -> List[str]:
        """Return the interpreter for docs commands, creating the venv if asked."""
        if not venv:
            return self._resolve(tools.PYTHON)

        venv_name = require("VENV_NAME", self.config.venv_name)
        creator = self._resolve(tools.VIRTUALENV)
        self._invoke([*creator, venv_name])
        return [str(self.root / venv_name / "bin" / "python3")]

    def build_docs(self, venv: bool = False) -> List[str]:
        """Install docs requirements and build the site.

        Returns:
            The interpreter command used, for follow-up docs commands
        """
        python = self._docs_python(venv)
        pip_install = [
            *python, "-m", "pip", "install",
            "-r", DOCS_REQUIREMENTS,
            "--disable-pip-version-check",
        ]
        if venv:
            pip_install.extend(["--no-cache-dir", "--prefer-binary"])
        self._invoke(pip_install)
        self._invoke([*python, "-m", "mkdocs", "build", "--clean", "--config-file", MKDOCS_CONFIG])
        return python

    def serve_docs(self, venv: bool = False) -> None:
        python = self.build_docs(venv=venv)
        self._invoke([*python, "-m", "mkdocs", "serve", "--verbose", "--dirtyreload"])

    def deploy_docs(self, require_clean: bool = True) -> None:
        """Publish the docs site to the gh-pages branch."""
        python = self._resolve(tools.PYTHON)
        if require_clean:
            self._workspace().ensure_clean()
        self._invoke([
            *python, "-m", "mkdocs", "--verbose", "gh-deploy",
            "--force", "--remote-branch", GH_PAGES_BRANCH,
        ])

    # Web dependencies and housekeeping

    def install_deps(self) -> None:
        self._invoke([*self._resolve(tools.NPM), "install"])

    def run_all(self) -> None:
        self._invoke([*self._resolve(tools.NPM), "run", "all"])

    def clean(self) -> List[Path]:
        """Remove temporary directories, packaged charts, built site and venv."""
        names = [
            self.config.tmp_base,
            self.config.release_name,
            self.config.gh_pages_name,
            self.config.venv_name,
        ]
        workspace = Workspace(self.root, [], self.runner)
        return workspace.remove(name for name in names if name)

    def versions(self) -> None:
        """Print versions of the required supporting utilities."""
        engine = self._resolve(tools.CONTAINER_ENGINE)
        tilt = self._resolve(tools.TILT)
        helm = self._resolve(tools.HELM)
        self._invoke([*engine, "--version"])
        self._invoke([*tilt, "version"])
        self._invoke([*helm, "version"])

    def directories(self) -> List[str]:
        return Workspace(self.root, [], self.runner).directories()
