"""Logging utilities module.

Log messages may mark values with ``$$'name'$$`` and ``$${key: value}$$``.
On a color terminal the markers become highlighted text; in log files and on
plain terminals they are rendered without the ``$$`` delimiters.
"""

import logging
import re
import sys
from functools import lru_cache
from logging.handlers import RotatingFileHandler
from pathlib import Path
from types import FrameType
from typing import ClassVar

import colorama
from colorama import Fore, Style

__all__ = ["CleanFormatter", "ColorFormatter", "Logger", "get_logger"]

QUOTED_MARKER = re.compile(r"\$\$'((?:[^']|'(?!\$\$))*)'\$\$")
BRACED_MARKER = re.compile(r"\$\$\{(.*?)\}\$\$")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s\t%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def supports_color() -> bool:
    """Whether stdout is an interactive terminal."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


class CleanFormatter(logging.Formatter):
    """Formatter that renders the value markers as plain text."""

    def render(self, msg: str) -> str:
        """Replace the value markers of a message."""
        return BRACED_MARKER.sub(r"{\1}", QUOTED_MARKER.sub(r"'\1'", msg))

    def format(self, record: logging.LogRecord) -> str:
        """Format a record, leaving the record itself unchanged.

        Args:
            record (logging.LogRecord): Log record to format

        Returns:
            str: The formatted log line
        """
        if not isinstance(record.msg, str):
            return super().format(record)

        msg = record.msg
        record.msg = self.render(msg)
        try:
            return super().format(record)
        finally:
            record.msg = msg


class ColorFormatter(CleanFormatter):
    """Formatter that renders the value markers and level names in color."""

    LEVEL_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "SUCCESS": Fore.GREEN + Style.BRIGHT,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT,
    }

    def render(self, msg: str) -> str:
        """Highlight names in light blue and dim the context values."""
        msg = QUOTED_MARKER.sub(f"{Fore.LIGHTBLUE_EX}'\\1'{Style.RESET_ALL}", msg)
        return BRACED_MARKER.sub(f"{Style.DIM}{{\\1}}{Style.RESET_ALL}", msg)

    def format(self, record: logging.LogRecord) -> str:
        """Format a record with a colored level name."""
        levelname = record.levelname
        color = self.LEVEL_COLORS.get(levelname, "")
        record.levelname = f"{color}{levelname}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _calling_class(frame: FrameType) -> str | None:
    """Name the class whose method is running in ``frame``, if any."""
    owner = frame.f_locals.get("self")
    if owner is not None:
        return None if isinstance(owner, logging.Logger) else type(owner).__name__
    cls = frame.f_locals.get("cls")
    return cls.__name__ if isinstance(cls, type) else None


class Logger(logging.Logger):
    """Logger with a SUCCESS level that prefixes method calls with the class."""

    SUCCESS = logging.INFO + 5

    def __init__(self, name, level=logging.NOTSET):
        """Initialize the logger and register the SUCCESS level name."""
        super().__init__(name, level)
        logging.addLevelName(self.SUCCESS, "SUCCESS")

    def _log(
        self,
        level,
        msg,
        args,
        exc_info=None,
        extra=None,
        stack_info=False,
        stacklevel=1,
    ):
        # Frame 2 is the code that called info(), warning(), log()...
        owner = _calling_class(sys._getframe(2))
        if owner and isinstance(msg, str):
            msg = f"{owner}: {msg}"
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

    def success(self, msg, *args, **kwargs):
        """Log a message with SUCCESS level."""
        self.log(self.SUCCESS, msg, *args, **kwargs)

    def setup(self, log_level: str, log_dir: str | Path | None = None) -> None:
        """Replace the handlers with a console handler and an optional log file.

        Args:
            log_level (str): Level name, 'SUCCESS' included.
            log_dir (str | Path | None): Directory of the rotating log file.
        """
        level = logging.getLevelName(str(log_level))
        self.setLevel(level)

        for handler in self.handlers[:]:
            self.removeHandler(handler)
            handler.close()

        try:
            color = supports_color()
            if color:
                colorama.just_fix_windows_console()
        except (AttributeError, OSError):
            color = False

        formatter_class = ColorFormatter if color else CleanFormatter
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter_class(LOG_FORMAT, datefmt=DATE_FORMAT))
        self.addHandler(console_handler)

        if log_dir is not None:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_path / f"{self.name}.log",
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5,
            )
            file_handler.setFormatter(CleanFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            self.addHandler(file_handler)


logging.setLoggerClass(Logger)


@lru_cache(maxsize=1)
def get_logger() -> Logger:
    """Get the main application logger.

    Returns:
        Logger: Main application logger instance
    """
    from anisync.config.settings import get_config

    config = get_config()

    logger = logging.getLogger("AniSync")
    if not isinstance(logger, Logger):
        logger = Logger("AniSync")
    logger.setup(config.log_level, config.data_path / "logs")
    return logger
