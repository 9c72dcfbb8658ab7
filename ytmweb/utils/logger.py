"""
Logging for ytmweb

Console output is reserved for the user: only warnings, errors and records
explicitly marked with `extra={'console_output': True}` reach it. The
optional rotating log file gets every record at the configured level with
module and function names, which is where request and parser traces go.

Requests carry session credentials in their headers, so every handler
masks SAPISIDHASH signatures and session cookie values before a record is
written anywhere.
"""

import functools
import logging
import logging.handlers
import re
import sys
import time
from pathlib import Path
from typing import Optional
import colorama
from colorama import Fore, Back, Style

from ..config.settings import get_settings


colorama.init()

# Connection pool chatter from the HTTP stack
EXTERNAL_LOGGERS = ('urllib3', 'urllib3.connectionpool', 'requests', 'charset_normalizer')

FILE_FORMAT = '%(asctime)s | %(name)-30s | %(levelname)-8s | %(funcName)-20s | %(message)s'
FILE_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Cookies whose values authenticate the session
SESSION_COOKIE_NAMES = ('SAPISID', '__Secure-3PAPISID', '__Secure-1PAPISID', 'APISID', 'HSID', 'SSID', 'SID')

SIGNATURE_PATTERN = re.compile(r'(SAPISIDHASH\s+\d+_)[0-9a-fA-F]+')
COOKIE_PATTERN = re.compile(r'\b(' + '|'.join(re.escape(name) for name in SESSION_COOKIE_NAMES) + r')=([^;\s]+)')

SIZE_UNITS = {'B': 1, 'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}


def redact(text: str) -> str:
    """Mask signature digests and session cookie values in a message"""
    text = SIGNATURE_PATTERN.sub(r'\1***', text)
    return COOKIE_PATTERN.sub(r'\1=***', text)


class RedactingFilter(logging.Filter):
    """Rewrite the record message with credentials masked"""

    def filter(self, record):
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class ConsoleMessageFilter(logging.Filter):
    """Let through warnings and records marked for the user"""

    def filter(self, record):
        return record.levelno >= logging.WARNING or getattr(record, 'console_output', False)


class ColoredFormatter(logging.Formatter):
    """Console formatter coloring warnings and errors"""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Back.WHITE + Style.BRIGHT,
    }

    def __init__(self, fmt: str = '%(message)s', use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if self.use_colors and record.levelno >= logging.WARNING:
            return f"{self.COLORS.get(record.levelname, '')}{text}{Style.RESET_ALL}"
        return text


def parse_size(size_str: str) -> int:
    """
    Parse a size such as "10MB" or "512 KB" into bytes

    Raises:
        ValueError: If the unit or number is not recognised
    """
    match = re.match(r'^(\d+(?:\.\d+)?)\s*([KMG]?B)$', size_str.upper().strip())
    if not match:
        raise ValueError(f"Invalid size format: {size_str}")
    number, unit = match.groups()
    return int(float(number) * SIZE_UNITS[unit])


def _console_handler(colored_output: bool, show_all: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)
    if not show_all:
        handler.addFilter(ConsoleMessageFilter())
    handler.addFilter(RedactingFilter())
    handler.setFormatter(ColoredFormatter(use_colors=colored_output))
    return handler


def _file_handler(log_file: Path, level: int, max_size: str, backup_count: int) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=parse_size(max_size),
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.addFilter(RedactingFilter())
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console_output: bool = True,
    colored_output: bool = True,
    max_size: str = "10MB",
    backup_count: int = 3,
    verbose: bool = False
) -> None:
    """
    Replace the root handlers with ytmweb's console and file handlers

    Args:
        level: Level of the file handler (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path of the rotating log file, None to disable it
        console_output: Attach the console handler
        colored_output: Color warnings and errors on the console
        max_size: Size at which the log file rotates
        backup_count: Rotated files to keep
        verbose: Show every record on the console, not only user-facing ones
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    if console_output:
        root_logger.addHandler(_console_handler(colored_output, show_all=verbose))

    if log_file:
        numeric_level = getattr(logging, level.upper(), logging.INFO)
        root_logger.addHandler(_file_handler(Path(log_file), numeric_level, max_size, backup_count))

    for name in EXTERNAL_LOGGERS:
        external = logging.getLogger(name)
        external.setLevel(logging.WARNING)
        external.propagate = False

    logging.getLogger('ytmweb').debug(f"Logging initialized - level {level}, file {log_file or 'none'}")


def get_current_log_file() -> Optional[Path]:
    """Path of the active rotating log file, None when file logging is off"""
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            return Path(handler.baseFilename)
    return None


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance for a module

    Args:
        name: Logger name (typically __name__)
    """
    return logging.getLogger(name)


def configure_from_settings(verbose: bool = False) -> None:
    """
    Configure logging from the logging section of the settings

    A relative log file name is placed in the configuration directory.

    Args:
        verbose: Force DEBUG level and show every record on the console
    """
    settings = get_settings()

    log_file_path = None
    if settings.logging.file:
        log_file_path = Path(settings.logging.file).expanduser()
        if not log_file_path.is_absolute():
            log_file_path = settings.get_config_directory() / log_file_path

    setup_logging(
        level="DEBUG" if verbose else settings.logging.level,
        log_file=str(log_file_path) if log_file_path else None,
        console_output=settings.logging.console_output,
        colored_output=settings.logging.colored_output,
        max_size=settings.logging.max_size,
        backup_count=settings.logging.backup_count,
        verbose=verbose
    )


def log_performance(func):
    """Log the duration of each call to func at DEBUG"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        start_time = time.time()

        try:
            result = func(*args, **kwargs)
            logger.debug(f"{func.__name__} completed in {time.time() - start_time:.3f}s")
            return result
        except Exception as e:
            logger.debug(f"{func.__name__} failed after {time.time() - start_time:.3f}s: {e}")
            raise

    return wrapper


# Initialize logging when module is imported
try:
    configure_from_settings()
except (OSError, ValueError):
    # Unwritable log directory or bad size setting: console only
    setup_logging(level="INFO", console_output=True)
