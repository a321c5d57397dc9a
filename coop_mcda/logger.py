# -*- coding: utf-8 -*-
"""
Logging for branch ranking runs.

Everything logs under the ``coop_mcda`` logger. Library calls never
install handlers, so an embedding application keeps control of output;
the command-line entry point calls :func:`setup_logger` for a colored
console and an optional rotating DEBUG file.

Fields set with :func:`log_context` (input file, report period, ...) are
appended to every line those handlers write.
"""

import logging
import logging.handlers
import os
import re
import sys
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from contextlib import contextmanager


LOG_NAME = "coop_mcda"
CONSOLE_FORMAT = "%(asctime)s │ %(levelname)s │ %(message)s%(context)s"
FILE_FORMAT = ("%(asctime)s | %(levelname)-8s | %(name)s | "
               "%(funcName)s:%(lineno)d | %(message)s%(context)s")
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 3


class Colors:
    """ANSI codes for console output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"

    _PATTERN = re.compile(r"\x1b\[[0-9;]*m")

    @classmethod
    def strip(cls, text: str) -> str:
        return cls._PATTERN.sub("", text)

    @staticmethod
    def enabled() -> bool:
        if os.getenv("NO_COLOR"):
            return False
        if os.getenv("FORCE_COLOR"):
            return True
        return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


class ColoredFormatter(logging.Formatter):
    """Console formatter; colors the level name when the terminal allows it."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.RED + Colors.BOLD,
    }

    def __init__(self, fmt: str, datefmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and Colors.enabled()

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)
        record = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, "")
        record.levelname = f"{color}{record.levelname:<8}{Colors.RESET}"
        return super().format(record)


class CleanFormatter(logging.Formatter):
    """File formatter; drops any ANSI codes embedded in messages."""

    def format(self, record: logging.LogRecord) -> str:
        return Colors.strip(super().format(record))


# =============================================================================
# Context fields
# =============================================================================

_context = threading.local()


def current_context() -> Dict[str, Any]:
    """Context fields of the calling thread."""
    if not hasattr(_context, "fields"):
        _context.fields = {}
    return _context.fields


def clear_context() -> None:
    _context.fields = {}


class ContextFilter(logging.Filter):
    """Renders the thread's context fields into ``record.context``."""

    def filter(self, record: logging.LogRecord) -> bool:
        fields = current_context()
        record.context = (" [" + " ".join(f"{k}={v}" for k, v in fields.items()) + "]"
                          if fields else "")
        return True


@contextmanager
def log_context(**fields):
    """
    Attach fields to log lines written inside the block.

    Example:
        with log_context(input="branches.csv"):
            logger.info("Ranking branches")   # ... Ranking branches [input=branches.csv]

    Nested blocks may shadow a field; the outer value is restored on exit.
    """
    ctx = current_context()
    saved = {key: ctx[key] for key in fields if key in ctx}
    ctx.update(fields)
    try:
        yield
    finally:
        for key in fields:
            if key in saved:
                ctx[key] = saved[key]
            else:
                ctx.pop(key, None)


# =============================================================================
# Setup and lookup
# =============================================================================

def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        if not isinstance(value, int):
            raise ValueError(f"Unknown log level: {level}")
        return value
    return int(level)


def setup_logger(level: Union[int, str] = logging.INFO,
                 log_file: Optional[Union[str, Path]] = None,
                 console: bool = True,
                 use_colors: bool = True,
                 name: str = LOG_NAME) -> logging.Logger:
    """
    Configure the package logger, replacing handlers from earlier calls.

    Parameters
    ----------
    level : int or str
        Console threshold
    log_file : str or Path, optional
        Rotating log file, always written at DEBUG
    console : bool
        Write to stdout
    use_colors : bool
        Color console level names when stdout is a terminal
    """
    level = _coerce_level(level)
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.DEBUG if log_file else level)
    logger.propagate = False

    context_filter = ContextFilter()

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, "%H:%M:%S", use_colors))
        console_handler.addFilter(context_filter)
        logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(CleanFormatter(FILE_FORMAT, "%Y-%m-%d %H:%M:%S"))
        file_handler.addFilter(context_filter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = LOG_NAME) -> logging.Logger:
    """Package logger, or a child of it for names outside the package."""
    if name == LOG_NAME or name.startswith(LOG_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOG_NAME}.{name}")


@contextmanager
def timed_operation(logger: logging.Logger, operation: str, level: int = logging.INFO):
    """
    Log start and elapsed time of a block.

    Example:
        with timed_operation(logger, "TOPSIS ranking", logging.DEBUG):
            ...
    """
    start = time.perf_counter()
    logger.log(level, f"Starting: {operation}")
    try:
        yield
    finally:
        logger.log(level, f"Finished: {operation} ({time.perf_counter() - start:.3f}s)")


# =============================================================================
# Console reporting
# =============================================================================

class PipelineLogger:
    """Banner, section and ranking lines for command-line runs."""

    ICONS = {"info": "•", "done": "✓", "warn": "⚡", "error": "✗"}

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def banner(self, title: str, width: int = 60) -> None:
        self.logger.info("═" * width)
        self.logger.info(title.center(width))
        self.logger.info("═" * width)

    def section(self, title: str) -> None:
        self.logger.info("─" * 40)
        self.logger.info(f"  {title}")

    def metric(self, name: str, value: Any) -> None:
        shown = f"{value:.4f}" if isinstance(value, float) else str(value)
        self.logger.info(f"  • {name}: {shown}")

    def metrics(self, values: Dict[str, Any]) -> None:
        for name, value in values.items():
            self.metric(name, value)

    def ranking(self, rows: List[tuple], title: str = "Ranking") -> None:
        """Log ``(name, score)`` pairs, best first."""
        self.logger.info(f"  {title}:")
        for i, (name, score) in enumerate(rows, 1):
            self.logger.info(f"    {i:>3}. {name}: {score:.4f}")

    def step(self, message: str, status: str = "info") -> None:
        self.logger.info(f"  {self.ICONS.get(status, '•')} {message}")


__all__ = [
    'LOG_NAME',
    'Colors',
    'ColoredFormatter',
    'CleanFormatter',
    'ContextFilter',
    'PipelineLogger',
    'clear_context',
    'current_context',
    'get_logger',
    'log_context',
    'setup_logger',
    'timed_operation',
]
