"""Logging for pinbridge.

A pinentry talks to its agent over stdin/stdout, so a stray log line on
stdout corrupts the protocol. Everything goes through the ``pinbridge``
logger, which never propagates to the root logger and writes to one of:

- the file named by ``logging.file`` or PINBRIDGE_LOG
- stderr, but only when stderr is an interactive console (gpg-agent
  normally connects it to a pipe nobody reads)
- nowhere (a NullHandler)

Verbosity follows ``--verbose``/``logging.verbose`` (0 errors only, up to
4 for TRACE), falling back to the ``logging.level`` name.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pinbridge.config.schema import LoggingConfig

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

LOG_ENV_VAR = "PINBRIDGE_LOG"

logger = logging.getLogger("pinbridge")

_initialized = False

_LEVEL_MAP = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "VERBOSE": VERBOSE,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_VERBOSITY_MAP = {
    0: logging.ERROR,
    1: logging.WARNING,
    2: logging.INFO,
    3: VERBOSE,
    4: TRACE,
}


class _LowercaseLevelFormatter(logging.Formatter):
    """``12:00:00 info: message``"""

    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        return super().format(record)


def resolve_level(config: LoggingConfig | None) -> int:
    """Pick the effective log level: verbose (int) wins over level (str)."""
    if config:
        if config.verbose is not None:
            return _VERBOSITY_MAP.get(config.verbose, TRACE)
        if config.level:
            return _LEVEL_MAP.get(config.level.upper(), logging.INFO)
    return logging.INFO


def _console_available() -> bool:
    return sys.stderr is not None and sys.stderr.isatty()


def _attach(handler: logging.Handler, formatter: logging.Formatter, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Attach the pinbridge handler once; later calls do nothing.

    Args:
        config: Level, verbosity and file settings. The file falls back to
            PINBRIDGE_LOG when the config names none.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    level = resolve_level(config)
    logger.setLevel(level)
    logger.propagate = False

    formatter = _LowercaseLevelFormatter(
        "%(asctime)s %(levelname)s: %(message)s", datefmt="%H:%M:%S"
    )

    log_path = config.file if config and config.file else os.environ.get(LOG_ENV_VAR)
    file_error: OSError | None = None

    if log_path:
        try:
            handler = logging.FileHandler(os.path.expanduser(log_path), mode="a", encoding="utf-8")
        except OSError as e:
            file_error = e
        else:
            _attach(handler, formatter, level)

    if not logger.handlers and _console_available():
        _attach(logging.StreamHandler(sys.stderr), formatter, level)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    if file_error is not None:
        logger.warning("Cannot open log file %s: %s", log_path, file_error)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the pinbridge logger, or its child ``pinbridge.<name>``."""
    if name:
        return logger.getChild(name)
    return logger
