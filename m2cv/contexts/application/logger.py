"""
Application context logger.

Provides logging interface for application context with automatic [app] prefix.
All application modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from m2cv.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[app]"


def setup_application_logger(log_dir: Path, command: str) -> Path:
    """
    Setup logger for application context.

    Args:
        log_dir: Directory for this logging session
        command: Command name for provenance (e.g. "apply", "write")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="app",
        log_dir=log_dir,
        extra_provenance={"Command": command},
    )


# Wrapper functions with automatic [app] prefix


def _log_info(message: str) -> None:
    """Log info message with [app] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [app] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [app] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level application-specific logging helpers


def log_application_created(app_path: Path, job_file: Path) -> None:
    """Log creation of a new application folder."""
    _log_success(f"Created application folder: {app_path}")
    _log_info(f"  Job description copied to: {job_file}")


def log_revision_written(revision_path: Path, num_chars: int) -> None:
    """Log a newly written revision."""
    _log_success(f"Optimized CV written to: {revision_path}")
    _log_debug(f"  Revision size: {num_chars} chars")
