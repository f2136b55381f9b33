"""Collect the log files sitting directly inside a directory"""

import logging
import os

from logsize.exceptions import DirectoryReadError


logger = logging.getLogger(__name__)


def list_log_files(directory: str) -> list[str]:
    """
    List regular files that are direct children of ``directory``.

    Subdirectories are not descended into. Symlinks are followed, so a link to
    a regular file is listed and a link to a directory is not.

    Args:
        directory: Path to the log directory

    Returns:
        Sorted list of file paths (joined onto ``directory``)

    Raises:
        DirectoryReadError: if the directory is missing, not a directory,
            or cannot be read
    """
    log_files = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    is_file = entry.is_file()
                except OSError as e:
                    # Broken entries (e.g. dangling symlinks on some systems) are not files
                    logger.debug(f'Skipping unreadable entry {entry.path}: {e}')
                    continue
                if is_file:
                    log_files.append(entry.path)
    except OSError as e:
        raise DirectoryReadError(directory, e) from e

    log_files.sort()
    logger.debug(f'Found {len(log_files)} files in {directory}')
    return log_files
