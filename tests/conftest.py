"""Pytest configuration and shared fixtures for logsize tests.

Auto-use fixtures keep LOGSIZE_* environment variables and root logging
handlers from leaking between tests.
"""

import logging
import os

import pytest


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Clear LOGSIZE_* variables so the user's shell doesn't change defaults."""
    for key in list(os.environ):
        if key.startswith('LOGSIZE_'):
            monkeypatch.delenv(key)
    yield


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo logging.basicConfig(force=True) calls made by CLI invocations."""
    root = logging.getLogger()
    saved_level = root.level
    yield
    # pytest's capture handlers subclass StreamHandler; only drop the plain ones
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(saved_level)


def access_line(path: str, size: str | int, status: int = 200, method: str = 'GET', protocol: str = 'HTTP/1.1') -> str:
    """Build one combined-format access-log line."""
    return (
        f'203.0.113.7 - - [10/Oct/2023:13:55:36 +0000] "{method} {path} {protocol}" {status} {size} '
        f'"-" "Mozilla/5.0"\n'
    )


@pytest.fixture
def write_log():
    """Factory fixture: write_log(directory, name, lines) -> path."""

    def _write(directory, name: str, lines: list[str]) -> str:
        path = os.path.join(str(directory), name)
        with open(path, 'w') as f:
            f.writelines(lines)
        return path

    return _write
