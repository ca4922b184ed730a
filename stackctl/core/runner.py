"""Execution of composed command lines against external tools."""
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List

from stackctl.core.errors import ConfigurationMissing, UpstreamToolFailure
from stackctl.core.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CommandInvocation:
    """One external command: argument vector plus working directory."""

    argv: List[str]
    cwd: Path

    def display(self) -> str:
        return shlex.join(self.argv)


class CommandRunner:
    """Runs invocations one at a time and fails fast on non-zero exit.

    Child processes inherit the terminal, so tool output and error text
    reach the user unmodified.
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def run(self, invocation: CommandInvocation) -> int:
        """Execute an invocation, raising UpstreamToolFailure on non-zero exit."""
        command_str = invocation.display()

        if self.dry_run:
            logger.info(f"DRY RUN: Would execute: {command_str}")
            return 0

        logger.info(f"Executing: {command_str}")
        try:
            result = subprocess.run(invocation.argv, cwd=invocation.cwd, check=False)
        except FileNotFoundError as exc:
            raise ConfigurationMissing(f"Executable not found: {invocation.argv[0]}") from exc

        if result.returncode != 0:
            logger.error(f"Command exited with code {result.returncode}")
            raise UpstreamToolFailure(invocation.argv, result.returncode)
        return result.returncode

    def capture(self, invocation: CommandInvocation) -> str:
        """Run a read-only query and return its stdout.

        Queries run in dry-run mode as well; they never change anything.
        """
        logger.debug(f"Querying: {invocation.display()}")
        try:
            result = subprocess.run(
                invocation.argv,
                cwd=invocation.cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ConfigurationMissing(f"Executable not found: {invocation.argv[0]}") from exc

        if result.returncode != 0:
            if result.stderr:
                logger.error(f"Error output: {result.stderr.strip()}")
            raise UpstreamToolFailure(invocation.argv, result.returncode)
        return result.stdout
