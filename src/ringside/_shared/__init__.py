# Area: Shared
"""
Shared utilities used across the engine.

This package contains:
- Logging configuration
"""

from .logging_config import (
    JSONFormatter,
    TerminalFormatter,
    log_engine_error,
    setup_logging,
)

__all__ = [
    "JSONFormatter",
    "TerminalFormatter",
    "log_engine_error",
    "setup_logging",
]
