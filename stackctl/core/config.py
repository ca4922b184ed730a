"""stackctl runtime configuration and settings.

Values resolve in this order: explicit CLI option, environment variable,
the ``variables`` mapping of ``stackctl.yml`` in the project root, and
finally the built-in default. Empty strings count as unset.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from stackctl.core.errors import ConfigurationMissing

CONFIG_FILE_NAME = "stackctl.yml"

# Built-in defaults
DEFAULT_IMAGE = "styled-java-patterns"
DEFAULT_IMAGE_REPOSITORY = "styled-java-patterns"
DEFAULT_IMAGE_TAG = "latest"
DEFAULT_CLUSTER_NAME = "backend-java-patterns"
DEFAULT_CLUSTER_NAMESPACE = "webapp"
DEFAULT_RELEASE_NAME = "release"
DEFAULT_GH_PAGES_NAME = "site"
DEFAULT_VENV_NAME = "venv"
DEFAULT_TMP_BASE = ".tmp"


def load_project_variables(project_dir: Path) -> Dict[str, Any]:
    """Read the ``variables`` mapping from ``stackctl.yml`` if the file exists."""
    config_file = Path(project_dir) / CONFIG_FILE_NAME
    if not config_file.exists():
        return {}

    try:
        with open(config_file) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationMissing(f"Could not parse {config_file}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationMissing(f"{config_file} must contain a mapping")

    variables = data.get("variables") or {}
    if not isinstance(variables, dict):
        raise ConfigurationMissing(f"{config_file}: 'variables' must be a mapping")
    return variables


def require(name: str, value: Optional[str], hint: Optional[str] = None) -> str:
    """Return value or abort the run when it is missing or empty."""
    if value:
        return value
    message = f"Required variable {name} is not set"
    if hint:
        message = f"{message}. {hint}"
    raise ConfigurationMissing(message, name=name)


@dataclass
class StackConfig:
    """Resolved configuration for one stackctl run.

    Attributes:
        project_dir: Root the tools run in (default: current directory)
        image: Base image name used to derive okteto/docker image names
        image_repository: Repository for images built by ``docker build``
        image_tag: Floating tag applied next to the git revision tag
        okteto_image: Image name for the okteto build (default: okteto/<image>)
        docker_image: Image name for the okteto build (default: alexanderr/<image>)
        docker_tag: Dockerfile flavour under distribution/docker-images (no default)
        cluster_name: Helm release name
        cluster_namespace: Kubernetes namespace for the release
        release_name: Directory that receives packaged charts
        gh_pages_name: Directory the docs site is built into
        venv_name: Virtual environment directory for docs builds
        tmp_base: Scratch directory removed by ``clean``
        dry_run: Log commands instead of running them
        variables: Non-empty ``variables`` from stackctl.yml, consulted for
            tool overrides (PYTHON, NPM, DOCKER_CMD, ...) after the environment
    """

    project_dir: Path = field(default_factory=Path.cwd)
    image: str = DEFAULT_IMAGE
    image_repository: str = DEFAULT_IMAGE_REPOSITORY
    image_tag: str = DEFAULT_IMAGE_TAG
    okteto_image: str = f"okteto/{DEFAULT_IMAGE}"
    docker_image: str = f"alexanderr/{DEFAULT_IMAGE}"
    docker_tag: Optional[str] = None
    cluster_name: str = DEFAULT_CLUSTER_NAME
    cluster_namespace: str = DEFAULT_CLUSTER_NAMESPACE
    release_name: str = DEFAULT_RELEASE_NAME
    gh_pages_name: str = DEFAULT_GH_PAGES_NAME
    venv_name: str = DEFAULT_VENV_NAME
    tmp_base: str = DEFAULT_TMP_BASE
    dry_run: bool = False
    variables: Dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_env(
        cls,
        project_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "StackConfig":
        """Create config from environment variables and the project file.

        Environment variables:
            STACKCTL_PROJECT_DIR: Project root (when project_dir is not given)
            STACKCTL_DRY_RUN: Set to 1 to log commands without running them
            IMAGE, IMAGE_REPOSITORY, IMAGE_TAG, OKTETO_IMAGE, DOCKER_IMAGE,
            DOCKER_TAG, CLUSTER_NAME, CLUSTER_NAMESPACE, RELEASE_NAME,
            GH_PAGES_NAME, VENV_NAME, TMP_BASE

        Returns:
            StackConfig instance with values from environment or defaults
        """
        env = os.environ if environ is None else environ
        root = Path(project_dir or env.get("STACKCTL_PROJECT_DIR") or Path.cwd())
        if not root.is_dir():
            raise ConfigurationMissing(f"Project directory {root} does not exist")
        file_vars = load_project_variables(root)

        def lookup(name: str, default: Optional[str]) -> Optional[str]:
            value = env.get(name) or file_vars.get(name)
            return str(value) if value else default

        image = lookup("IMAGE", DEFAULT_IMAGE)
        return cls(
            project_dir=root,
            image=image,
            image_repository=lookup("IMAGE_REPOSITORY", DEFAULT_IMAGE_REPOSITORY),
            image_tag=lookup("IMAGE_TAG", DEFAULT_IMAGE_TAG),
            okteto_image=lookup("OKTETO_IMAGE", f"okteto/{image}"),
            docker_image=lookup("DOCKER_IMAGE", f"alexanderr/{image}"),
            docker_tag=lookup("DOCKER_TAG", None),
            cluster_name=lookup("CLUSTER_NAME", DEFAULT_CLUSTER_NAME),
            cluster_namespace=lookup("CLUSTER_NAMESPACE", DEFAULT_CLUSTER_NAMESPACE),
            release_name=lookup("RELEASE_NAME", DEFAULT_RELEASE_NAME),
            gh_pages_name=lookup("GH_PAGES_NAME", DEFAULT_GH_PAGES_NAME),
            venv_name=lookup("VENV_NAME", DEFAULT_VENV_NAME),
            tmp_base=lookup("TMP_BASE", DEFAULT_TMP_BASE),
            dry_run=env.get("STACKCTL_DRY_RUN") == "1",
            variables={name: str(value) for name, value in file_vars.items() if value},
        )


# Global config instance (can be overridden)
_config: Optional[StackConfig] = None


def get_config() -> StackConfig:
    """Get the global stackctl configuration.

    Returns:
        StackConfig instance (creates from environment if not set)
    """
    global _config
    if _config is None:
        _config = StackConfig.from_env()
    return _config


def set_config(config: Optional[StackConfig]):
    """Set the global stackctl configuration.

    Args:
        config: StackConfig instance to use globally, or None to reset
    """
    global _config
    _config = config
