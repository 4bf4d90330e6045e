"""
ANSI color helpers for ethgas console output.
"""

import os
import sys


class Colors:
    """ANSI escape sequences."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'

    BRIGHT_RED = '\033[91m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_CYAN = '\033[96m'


def _stdout_supports_color() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    return hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()


SUPPORTS_COLOR = _stdout_supports_color()


# Toggled off by the reporter when writing to a file or when colors are disabled
_enabled = SUPPORTS_COLOR


def set_colors_enabled(enabled: bool) -> None:
    """Force colored output on or off for the helpers below."""
    global _enabled
    _enabled = enabled


def _wrap(text, code: str) -> str:
    if not _enabled:
        return str(text)
    return f"{code}{text}{Colors.RESET}"


def bold(text) -> str:
    return _wrap(text, Colors.BOLD)


def dim(text) -> str:
    return _wrap(text, Colors.DIM)


def error(text) -> str:
    return _wrap(text, Colors.BRIGHT_RED)


def info(text) -> str:
    return _wrap(text, Colors.BRIGHT_CYAN)


def gas_value(value) -> str:
    """Format a gas amount."""
    return _wrap(f"{value} gas", Colors.GREEN)


def contract_name(text) -> str:
    return _wrap(text, Colors.BOLD + Colors.CYAN)


def method_name(text) -> str:
    return _wrap(text, Colors.YELLOW)
