"""Error taxonomy for stackctl operations.

Every error is fatal: the CLI layer prints it and exits with ``exit_code``.
Nothing is retried and nothing is rolled back.
"""
from typing import List, Optional

# Exit code for any precondition that fails before a tool runs
PRECONDITION_EXIT_CODE = 2


class StackctlError(Exception):
    """Base class for all stackctl failures."""

    exit_code: int = 1


class ConfigurationMissing(StackctlError):
    """Raised when a required variable or external tool cannot be resolved."""

    exit_code = PRECONDITION_EXIT_CODE

    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(message)
        self.name = name


class WorkspaceNotClean(StackctlError):
    """Raised when the git working tree has uncommitted changes."""

    exit_code = PRECONDITION_EXIT_CODE

    def __init__(self, message: str = "Workspace is not clean; please commit changes first.",
                 changes: Optional[List[str]] = None):
        super().__init__(message)
        self.changes = changes or []


class UpstreamToolFailure(StackctlError):
    """Raised when a delegated tool exits non-zero.

    The tool's own return code becomes the process exit code.
    """

    def __init__(self, command: List[str], returncode: int):
        self.command = command
        self.returncode = returncode
        # Signals come back as negative return codes
        self.exit_code = returncode if returncode > 0 else 1
        super().__init__(f"Command '{command[0]}' exited with code {returncode}")
