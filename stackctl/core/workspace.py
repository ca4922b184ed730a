"""Version control queries and build artifact housekeeping for the project root."""
import shutil
from pathlib import Path
from typing import Iterable, List

from stackctl.core.errors import UpstreamToolFailure, WorkspaceNotClean
from stackctl.core.logger import get_logger
from stackctl.core.runner import CommandInvocation, CommandRunner

logger = get_logger(__name__)

# Changes to these files never make the workspace dirty
IGNORED_CHANGES = ("CHANGELOG.md",)


class Workspace:
    """The project checkout that every tool runs against."""

    def __init__(self, root: Path, git: List[str], runner: CommandRunner):
        self.root = Path(root)
        self.git = git
        self.runner = runner

    def _git(self, *args: str) -> str:
        return self.runner.capture(CommandInvocation([*self.git, *args], self.root))

    def revision(self) -> str:
        """Return the commit hash of HEAD."""
        return self._git("rev-parse", "HEAD").strip()

    def uncommitted_changes(self) -> List[str]:
        """List porcelain status lines for tracked files, minus ignored ones."""
        output = self._git("status", "--porcelain", "--untracked-files=no")
        return [
            line for line in output.splitlines()
            if line.strip() and not any(name in line for name in IGNORED_CHANGES)
        ]

    def ensure_clean(self) -> None:
        """Abort unless the working tree has no uncommitted changes.

        Raises:
            WorkspaceNotClean: On local changes, or when git status itself fails
        """
        try:
            changes = self.uncommitted_changes()
        except UpstreamToolFailure as exc:
            raise WorkspaceNotClean(
                f"Could not read workspace status ({exc}); please commit changes first."
            ) from exc

        if changes:
            for line in changes:
                logger.debug(f"Uncommitted: {line}")
            raise WorkspaceNotClean(changes=changes)

    def directories(self) -> List[str]:
        """Top-level, non-hidden directories of the project, sorted."""
        return sorted(
            f"{entry.name}/" for entry in self.root.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        )

    def remove(self, names: Iterable[str]) -> List[Path]:
        """Remove build artifact directories relative to the root.

        Paths that resolve outside the project root are skipped.

        Returns:
            Paths that were (or, in dry-run mode, would be) removed
        """
        root = self.root.resolve()
        removed = []
        for name in names:
            target = (self.root / name).resolve()
            if target == root or not target.is_relative_to(root):
                logger.warning(f"Refusing to remove {name}: outside project root")
                continue
            if not target.exists():
                continue

            if self.runner.dry_run:
                logger.info(f"DRY RUN: Would remove {target}")
            elif target.is_dir():
                shutil.rmtree(target)
            else:
                target.unlink()
            removed.append(target)
        return removed
