"""
Shared loguru setup for m2cv commands.

Each run gets its own log directory (outs/logs/<command>_<timestamp>/) holding
one DEBUG-level file per context, while INFO and above go to a console stream.
Contexts wrap this in contexts/{context}/logger.py and add their own prefix.
"""

import sys
from pathlib import Path
from typing import Optional, TextIO

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[dict] = None,
    level_colors: Optional[dict] = None,
    sink: Optional[TextIO] = None,
) -> Path:
    """
    Point loguru at a per-run log file and a console stream.

    Any previously installed handlers are dropped, so the last call wins. The
    run's provenance (argv, cwd, interpreter) is written first.

    Args:
        context_name: Log file stem ("config", "app", "session")
        log_dir: Run directory, created if missing
        extra_provenance: Extra header lines, e.g. {"Application": "applications/acme-sre"}
        level_colors: Per-level console color overrides
        sink: Console stream, sys.stdout when None. The session server passes
              sys.stderr since its stdout is the MCP channel.

    Returns:
        Path to the <context_name>.log file

    Example:
        log_file = setup_logger(
            "app",
            Path("outs/logs/apply_20251114_123456"),
            extra_provenance={"Command": "apply"},
        )
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sink or sys.stdout, format=CONSOLE_FORMAT, level="INFO", colorize=True)

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """Write a header block describing how this run was invoked."""
    rule = "=" * 80
    logger.info(rule)
    logger.info(f"m2cv command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info(rule)
