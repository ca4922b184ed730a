"""External tool references and their resolution on PATH."""
import os
import shlex
import shutil
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from stackctl.core.errors import ConfigurationMissing
from stackctl.core.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ToolReference:
    """An external executable, probed through an ordered candidate list.

    Each candidate is a tuple of tokens; only the first token is looked up
    on PATH, the rest are passed through (``docker compose``).
    """

    name: str
    env_var: Optional[str]
    candidates: Tuple[Tuple[str, ...], ...]

    def resolve(self, environ: Optional[Mapping[str, str]] = None) -> List[str]:
        """Return the command prefix for this tool.

        An environment override wins without probing. Otherwise the first
        candidate found on PATH is used.

        Raises:
            ConfigurationMissing: If no candidate is installed
        """
        env = os.environ if environ is None else environ

        override = env.get(self.env_var) if self.env_var else None
        if override:
            logger.debug(f"{self.name}: using {self.env_var}={override}")
            return shlex.split(override)

        for candidate in self.candidates:
            path = shutil.which(candidate[0])
            if path:
                logger.debug(f"{self.name}: resolved {' '.join(candidate)} -> {path}")
                return [path, *candidate[1:]]

        tried = ", ".join(" ".join(c) for c in self.candidates)
        raise ConfigurationMissing(
            f"Tool not found: {self.name} (tried {tried}). "
            f"Install it or set {self.env_var}.",
            name=self.name,
        )


CONTAINER_ENGINE = ToolReference("container engine", "DOCKER_CMD", (("docker",), ("podman",)))
COMPOSE = ToolReference("compose tool", "DOCKER_COMPOSE_CMD", (("docker-compose",), ("docker", "compose")))
TILT = ToolReference("tilt", "TILT_CMD", (("tilt",),))
HELM = ToolReference("helm", "HELM_CMD", (("helm",),))
OKTETO = ToolReference("okteto", "OKTETO_CMD", (("okteto",),))
PYTHON = ToolReference("python", "PYTHON", (("python3",),))
NPM = ToolReference("npm", "NPM", (("npm",),))
GIT = ToolReference("git", "GIT_CMD", (("git",),))
VIRTUALENV = ToolReference("virtualenv", "VIRTUALENV_CMD", (("virtualenv",), ("python3", "-m", "venv")))
