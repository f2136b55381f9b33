"""Utility functions for logsize"""

import logging
import os


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_int_env(key: str) -> int:
    """Read an integer setting; unset or malformed values read as 0."""
    try:
        return int(os.getenv(key, '0'))
    except ValueError:
        return 0


def get_str_env(key: str, default: str) -> str:
    return os.getenv(key, default)


_TRUE_VALUES = ('true', 'yes', '1')
_FALSE_VALUES = ('false', 'no', '0')


def get_bool_env(key: str, default: bool) -> bool:
    """
    Read a boolean setting such as LOGSIZE_FAIL_FAST.

    true/yes/1 and false/no/0 are accepted in any case. Anything else,
    including an unset variable, gives ``default``.
    """
    val = os.getenv(key, '').lower()
    if val in _TRUE_VALUES:
        return True
    if val in _FALSE_VALUES:
        return False
    return default


def resolve_log_level(quiet: bool = False, verbose: bool = False) -> int:
    """Pick the log level from CLI flags, falling back to LOGSIZE_LOG_LEVEL."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    level_name = get_str_env('LOGSIZE_LOG_LEVEL', 'INFO').upper()
    return getattr(logging, level_name, logging.INFO)


def setup_logging(level: int) -> None:
    """Configure root logging on stderr.

    ``force=True`` so repeated CLI invocations in one process (tests) pick up
    the new level and the current stderr.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
