"""
Logging configuration for the application.
Provider errors can echo request details, so credentials are masked before any handler sees a record.
"""
import logging
import re
import sys

from config import Config


class SecretRedactingFilter(logging.Filter):
    """Masks bearer tokens and `key=` query values in log messages."""

    PATTERNS = [
        (re.compile(r"(Bearer\s+)[^\s'\",]+", re.IGNORECASE), r"\1***"),
        (re.compile(r"([?&]key=)[^&\s'\"]+"), r"\1***"),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = message
        for pattern, replacement in self.PATTERNS:
            redacted = pattern.sub(replacement, redacted)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def resolve_level(level_name: str) -> int:
    """Map a LOG_LEVEL name to a logging level, defaulting to INFO."""
    level = logging.getLevelName((level_name or "").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Set up a logger writing to stdout.
    Colors are only used when stdout is a terminal (plain text in container logs).

    Args:
        name: Logger name
        level: Logging level; defaults to Config.LOG_LEVEL

    Returns:
        Configured logger instance
    """
    if level is None:
        level = resolve_level(Config.LOG_LEVEL)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(SecretRedactingFilter())

    formatter_class = ColoredFormatter if sys.stdout.isatty() else logging.Formatter
    handler.setFormatter(formatter_class(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    logger.addHandler(handler)
    return logger


app_logger = setup_logger("portfolio_chat")
