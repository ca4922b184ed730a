"""Unified logging for stackctl with console and optional file output."""
import logging
import tempfile
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console()

PACKAGE_LOGGER = "stackctl"

# Track if file logging has been set up
_file_handler: Optional[logging.FileHandler] = None


def setup_logging(log_file: Optional[str] = None, verbose: bool = False) -> Optional[Path]:
    """Configure log level and, when requested, a log file for stackctl.

    Args:
        log_file: Path to log file (no file logging when omitted)
        verbose: Enable debug-level logging

    Returns:
        Path of the active log file, or None

    Note:
        Falls back to the system temp directory if the log directory is
        not writable.
    """
    global _file_handler

    root_logger = logging.getLogger(PACKAGE_LOGGER)
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not log_file:
        return None

    if _file_handler is not None:
        return Path(_file_handler.baseFilename)

    target_log_file = Path(log_file)
    try:
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        target_log_file = Path(tempfile.gettempdir()) / "stackctl.log"

    _file_handler = logging.FileHandler(target_log_file)
    _file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    _file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.addHandler(_file_handler)

    root_logger.info(f"stackctl logging initialized: {target_log_file}")
    return target_log_file


def get_logger(name: str) -> logging.Logger:
    """Get a logger whose records reach the shared Rich console.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger under the ``stackctl`` hierarchy
    """
    root_logger = logging.getLogger(PACKAGE_LOGGER)

    # Only add console handler if not already present
    if not any(isinstance(h, RichHandler) for h in root_logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.INFO)

    return logging.getLogger(name)
