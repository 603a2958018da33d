# src/task_planner/logging_setup.py

"""
Logging for the planner REPL.

Replies are printed on stdout and log records go to stderr, so the console
handler only shows the planner's own records plus third-party problems.
The log file under the data dir keeps everything at DEBUG except HTTP
client internals, which are capped at WARNING for both outputs.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "task_planner"
LOG_FILENAME = "planner.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Sync legs log every request at DEBUG/INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def level_from_name(name: str | None, default: int = logging.WARNING) -> int:
    """Map "info" / "DEBUG" / "30" to a logging level; unknown names give `default`."""
    raw = (name or "").strip().upper()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default


class _PlannerOnlyFilter(logging.Filter):
    """Pass planner records; other loggers need `third_party_level` or above."""

    def __init__(self, third_party_level: int = logging.ERROR) -> None:
        super().__init__()
        self._third_party_level = third_party_level

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == APP_LOGGER or record.name.startswith(APP_LOGGER + "."):
            return True
        return record.levelno >= self._third_party_level


def setup_logging(
    *,
    log_dir: str | Path = ".local/planner",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """Install the console and file handlers on the root logger; returns the log file path."""
    log_file = Path(log_dir) / LOG_FILENAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    console.addFilter(_PlannerOnlyFilter())

    logfile = logging.FileHandler(log_file, encoding="utf-8")
    logfile.setLevel(file_level)
    logfile.setFormatter(formatter)

    root.addHandler(console)
    root.addHandler(logfile)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # warnings.warn(...) lands in the log file as 'py.warnings'
    logging.captureWarnings(True)
    return log_file
