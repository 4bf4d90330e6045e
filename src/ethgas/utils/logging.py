"""
Logging configuration for ethgas.

Centralized logging setup with colored console output and optional file
logging. Per-transaction attribution decisions are logged at the custom
TRACE level so they stay out of normal test output.
"""

import logging
import sys
from typing import Optional

from ethgas.utils.colors import Colors

# Custom log level for per-transaction resolution details
TRACE = 5
logging.addLevelName(TRACE, 'TRACE')


class ColoredFormatter(logging.Formatter):
    """
    Formatter that adds ANSI colors to log levels.

    Colors are only applied if the output stream supports them.
    """

    LEVEL_COLORS = {
        TRACE: Colors.DIM,
        logging.DEBUG: Colors.DIM,
        logging.INFO: Colors.BRIGHT_CYAN,
        logging.WARNING: Colors.BRIGHT_YELLOW,
        logging.ERROR: Colors.BRIGHT_RED,
        logging.CRITICAL: Colors.BOLD + Colors.BRIGHT_RED,
    }

    def __init__(self, fmt: str = None, datefmt: str = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, '')
            reset = Colors.RESET if color else ''
            record.levelname = f"{color}{record.levelname}{reset}"
        return super().format(record)


class EthGasLogger(logging.Logger):
    """
    Logger with trace level support.
    """

    def trace(self, msg, *args, **kwargs):
        """Log a message with TRACE level."""
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)


logging.setLoggerClass(EthGasLogger)


def setup_logging(
    level: int = logging.WARNING,
    quiet: bool = False,
    debug: bool = False,
    verbose: bool = False,
    log_file: Optional[str] = None,
    use_colors: bool = True
) -> logging.Logger:
    """
    Configure logging for ethgas.

    Args:
        level: Base logging level
        quiet: If True, suppress all console output
        debug: If True, set level to DEBUG
        verbose: If True, set level to TRACE (per-transaction detail)
        log_file: Optional path to a log file that records every TRACE message
        use_colors: Whether to use colored output

    Returns:
        Configured logger instance
    """
    if verbose:
        effective_level = TRACE
    elif debug:
        effective_level = logging.DEBUG
    else:
        effective_level = level

    logger = logging.getLogger('ethgas')
    # The log file always gets per-transaction detail; the console keeps its own level
    logger.setLevel(TRACE if log_file else effective_level)
    logger.handlers.clear()
    logger.propagate = False

    if not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(effective_level)

        supports_color = (
            hasattr(sys.stderr, 'isatty') and
            sys.stderr.isatty() and
            use_colors
        )

        console_handler.setFormatter(ColoredFormatter(
            fmt='%(levelname)s: %(message)s',
            use_colors=supports_color
        ))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(TRACE)
        file_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Optional child name. ``get_logger('scanner')`` returns the
              ``ethgas.scanner`` logger; no name returns the root ethgas logger.

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f'ethgas.{name}')
    return logging.getLogger('ethgas')


# Global logger instance for convenient access
logger = get_logger()
