from io import TextIOBase
import os

# ------------------------------------------------------------------------------
# Terminal Colors

# ANSI color codes
# Obtained from: http://www.bri1.com/files/06-2008/pretty.py
TERMINAL_FG_RED =           '\033[0;31m'
TERMINAL_FG_YELLOW =        '\033[0;33m'
TERMINAL_RESET =            '\033[0m'


def print_error(message: str, file: TextIOBase | None=None) -> None:
    print(_colorize(TERMINAL_FG_RED, message), file=file)


def print_warning(message: str, file: TextIOBase | None=None) -> None:
    if _quiet():
        return
    print(_colorize(TERMINAL_FG_YELLOW, message), file=file)


def _colorize(color_code: str, str_value: str) -> str:
    return (color_code + str_value + TERMINAL_RESET) if _use_colors() else str_value


def _use_colors() -> bool:
    return os.environ.get('STYLESNAP_NO_COLORS', 'False') != 'True'


def _quiet() -> bool:
    return os.environ.get('STYLESNAP_QUIET', 'False') == 'True'


# ------------------------------------------------------------------------------
