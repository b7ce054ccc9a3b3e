"""
Logging setup for the CTC estimator.

setup_logging() configures the root logger once per process (the API at
import, the CLI in main()). get_logger() returns an adapter that tags each
line with the analysis run id and stage, so concurrent requests can be
told apart in one log stream.
"""

import logging
import os
import sys
from typing import Optional

SIMPLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'

# DEBUG_MODE=true forces DEBUG regardless of the requested level
_debug_mode = os.getenv("DEBUG_MODE", "false").lower() == "true"


def set_global_debug_mode(enabled: bool) -> None:
    """Override DEBUG_MODE; takes effect on the next setup_logging() call."""
    global _debug_mode
    _debug_mode = enabled


class AnalysisLogger(logging.LoggerAdapter):
    """Prefixes messages with [run:xxxxxxxx] and [stage] when known."""

    def __init__(self, logger: logging.Logger, run_id: Optional[str] = None, stage: Optional[str] = None):
        super().__init__(logger, {})
        parts = []
        if run_id:
            parts.append(f"[run:{run_id[:8]}]")
        if stage:
            parts.append(f"[{stage}]")
        self.prefix = " ".join(parts)

    def process(self, msg, kwargs):
        if self.prefix:
            return f"{self.prefix} {msg}", kwargs
        return msg, kwargs


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Replace root handlers with a single stdout handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        format: "simple" or "json" (one object per line)
    """
    log_level = logging.DEBUG if _debug_mode else getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if format == "json":
        handler.setFormatter(logging.Formatter(JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(SIMPLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(name: str, run_id: Optional[str] = None, stage: Optional[str] = None) -> AnalysisLogger:
    """Logger for one analysis run, usually get_logger(__name__, run_id, "analysis")."""
    return AnalysisLogger(logging.getLogger(name), run_id, stage)
