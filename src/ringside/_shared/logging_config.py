# Area: Shared
"""
ringside._shared.logging_config — Structured logging setup
==========================================================

Configures dual logging: terminal (colored) + file (JSON).
Provides structured error logging for engine errors.
"""

from __future__ import annotations
import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from ..errors import RingsideError

# Package logger
logger = logging.getLogger("ringside")


class TerminalFormatter(logging.Formatter):
    """Colored formatter for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        original = record.levelname
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    """JSON formatter for file output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        error_type = getattr(record, "error_type", None)
        if error_type:
            log_data["error_type"] = error_type
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def setup_logging(
    log_file_path: Optional[str] = "ringside.log",
    level: Union[int, str] = logging.INFO,
) -> None:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str or None
        Path to the log file. None disables file logging.
    level : int or str
        Logging level. Defaults to INFO.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    pkg_logger = logging.getLogger("ringside")
    pkg_logger.setLevel(level)

    # Remove existing handlers
    for handler in list(pkg_logger.handlers):
        handler.close()
    pkg_logger.handlers.clear()

    terminal_handler = logging.StreamHandler(sys.stdout)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    pkg_logger.addHandler(terminal_handler)

    if log_file_path:
        try:
            log_path = Path(log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            pkg_logger.addHandler(file_handler)
        except OSError as e:
            pkg_logger.warning(f"Could not create log file: {e}")

    # Prevent propagation to root logger
    pkg_logger.propagate = False


def log_engine_error(error: "RingsideError") -> None:
    """
    Log an engine error in the structured format.

    Parameters
    ----------
    error : RingsideError
        The error to log.
    """
    error_block = error.format_error_log()

    # Print to terminal (bypassing logger for exact formatting)
    print(error_block, file=sys.stderr)

    logger.error(
        f"{error.__class__.__name__}: {error}",
        extra={"error_type": error.error_type},
    )
