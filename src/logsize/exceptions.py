"""Errors raised while scanning log directories"""


class LogSizeError(Exception):
    """Base class for all logsize errors."""


class DirectoryReadError(LogSizeError):
    """The log directory could not be listed."""

    def __init__(self, directory: str, cause: OSError):
        self.directory = directory
        self.cause = cause
        super().__init__(f'Cannot read directory {directory}: {cause.strerror or cause}')


class FileScanError(LogSizeError):
    """A log file could not be opened or failed mid-read."""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        self.reason = cause.strerror if isinstance(cause, OSError) and cause.strerror else str(cause)
        super().__init__(f'Cannot scan {path}: {self.reason}')


class PatternError(LogSizeError):
    """A size pattern is unknown or malformed."""


class ScanCancelledError(LogSizeError):
    """A file scan was stopped before reaching the end of the file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'Scan of {path} cancelled')
