from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "crit": logging.CRITICAL,
    "critical": logging.CRITICAL,
}


class BracketLevelFormatter(logging.Formatter):
    """Formatter adding bracketed lowercase level tags and UTC timestamps."""

    _TAGS = {
        logging.DEBUG: "[debug]",
        logging.INFO: "[info]",
        logging.WARNING: "[warn]",
        logging.ERROR: "[error]",
        logging.CRITICAL: "[crit]",
    }

    def formatTime(self, record, datefmt=None):
        """Format the record time as UTC ISO-8601 with Z suffix."""
        return datetime.fromtimestamp(record.created, timezone.utc).strftime(
            "%Y-%m-%dT%H:%M:%SZ"
        )

    def format(self, record):
        """Add level_tag attribute and format the record."""
        record.level_tag = self._TAGS.get(record.levelno, f"[lvl{record.levelno}]")
        return super().format(record)


def parse_level(value: Any, default: int = logging.WARNING) -> int:
    """Map a level name such as 'warn' to its logging constant."""
    return _LEVELS.get(str(value).lower(), default)


def init_logging(cfg: Optional[Dict[str, Any]]) -> None:
    """
    Brief: Configure the root logger for a walk.

    Inputs:
      - cfg: Optional mapping with keys:
          - level: debug, info, warn, error, crit (default: warn)
          - stderr: log to stderr (default: True)
          - file: path of a log file to append to (optional)

    Outputs:
      - None

    Example:
        >>> init_logging({"level": "debug", "stderr": True})
    """
    cfg = cfg or {}

    level = parse_level(cfg.get("level", "warn"))
    formatter = BracketLevelFormatter(fmt="%(asctime)s %(level_tag)s %(name)s: %(message)s")

    root = logging.getLogger()
    root.setLevel(level)

    # Drop handlers from a previous call so repeated init does not duplicate lines.
    for h in list(root.handlers):
        root.removeHandler(h)

    if cfg.get("stderr", True):
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(formatter)
        root.addHandler(stderr_handler)

    file_path = cfg.get("file")
    if isinstance(file_path, str) and file_path.strip():
        path = os.path.abspath(os.path.expanduser(file_path.strip()))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    logging.captureWarnings(True)
