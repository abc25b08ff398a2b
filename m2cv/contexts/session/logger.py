"""
Session context logger.

Provides logging interface for session context with automatic [session] prefix.
All session modules should import from this module, not from utils.logger directly.

The session server's stdout is the protocol channel, so console output goes to stderr.
"""

import sys
from pathlib import Path

from loguru import logger

from m2cv.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[session]"


def setup_session_logger(log_dir: Path, application_dir: str) -> Path:
    """
    Setup logger for a session server process.

    Args:
        log_dir: Directory for this session's logs
        application_dir: Application folder the session writes into

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="session",
        log_dir=log_dir,
        extra_provenance={"Application": application_dir},
        sink=sys.stderr,
    )


# Wrapper functions with automatic [session] prefix


def _log_info(message: str) -> None:
    """Log info message with [session] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [session] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [session] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [session] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [session] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level session-specific logging helpers


def log_state_change(old_state: str, new_state: str) -> None:
    """Log a session state transition."""
    _log_debug(f"State: {old_state} -> {new_state}")


def log_tool_result(tool_name: str, text: str, is_error: bool) -> None:
    """Log the outcome of a tool invocation."""
    if is_error:
        _log_error(f"{tool_name} failed: {text}")
    else:
        _log_success(f"{tool_name}: {text}")
