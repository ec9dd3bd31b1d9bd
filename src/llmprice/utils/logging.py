"""Logging for the pricing updater.

Every module does::

    from llmprice.utils.logging import get_logger
    logger = get_logger(__name__)

The first call wires the ``llmprice`` logger: a console handler for the
operator (level from ``LLMPRICE_LOG_LEVEL``, ``--debug`` raises it) and a
rotating file under ``logs/`` that keeps DEBUG detail from scheduled runs.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from ..config.settings import LOG_DIR, env_log_level

ROOT_LOGGER = "llmprice"
LOG_FILE = LOG_DIR / "llmprice.log"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUPS = 5

CONSOLE_FORMAT = "%(asctime)s [%(levelname)-7s] %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CONFIGURED = False
_CONSOLE: Optional[logging.Handler] = None


class SafeStreamHandler(logging.StreamHandler):
    """StreamHandler that survives consoles which cannot encode ``→``."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            stream = self.stream
            encoding = getattr(stream, "encoding", None) or "utf-8"
            try:
                stream.write(msg + self.terminator)
            except UnicodeEncodeError:
                stream.write(
                    msg.encode(encoding, errors="backslashreplace").decode(encoding) + self.terminator
                )
            self.flush()
        except Exception:
            self.handleError(record)


def _file_handler(target: Path) -> Optional[logging.Handler]:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            target,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
            delay=True,
        )
    except OSError:
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: Union[int, str, None] = None,
    log_file: Optional[Path] = None,
) -> None:
    """Attach console and file handlers to the ``llmprice`` logger once."""
    global _CONFIGURED, _CONSOLE
    if _CONFIGURED:
        return
    _CONFIGURED = True

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(logging.DEBUG)

    console = SafeStreamHandler(sys.stdout)
    console.setLevel(level if level is not None else env_log_level())
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console)
    _CONSOLE = console

    # read-only checkouts log to the console only
    handler = _file_handler(log_file or LOG_FILE)
    if handler is not None:
        root.addHandler(handler)


def set_console_level(level: Union[int, str]) -> None:
    setup_logging()
    if _CONSOLE is not None:
        _CONSOLE.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
