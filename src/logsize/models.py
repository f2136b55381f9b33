"""Pydantic models for scan results"""

import re

from pydantic import BaseModel, Field


BYTES_PER_GB = 1000**3

_DURATION_UNITS = {
    'ns': 1e-9,
    'µs': 1e-6,
    'us': 1e-6,
    'ms': 1e-3,
    's': 1.0,
    'm': 60.0,
    'h': 3600.0,
}
_DURATION_PART = re.compile(r'(\d+(?:\.\d+)?)\s*(ns|µs|us|ms|s|m|h)')


def bytes_to_gb(size_bytes: int) -> float:
    """Convert bytes to decimal gigabytes (1 GB = 1000**3 bytes)."""
    return size_bytes / BYTES_PER_GB


def format_duration(seconds: float) -> str:
    """
    Format a duration for humans, picking the largest sensible unit.

    Examples:
        0.00000085 -> '850ns', 0.0032 -> '3.20ms', 1.5321 -> '1.53s',
        123.1 -> '2m 3.10s'
    """
    if seconds < 1e-6:
        return f'{seconds * 1e9:.0f}ns'
    if seconds < 1e-3:
        return f'{seconds * 1e6:.2f}µs'
    if seconds < 1:
        return f'{seconds * 1e3:.2f}ms'
    if seconds < 60:
        return f'{seconds:.2f}s'
    minutes, rest = divmod(seconds, 60)
    if minutes < 60:
        return f'{int(minutes)}m {rest:.2f}s'
    hours, minutes = divmod(int(minutes), 60)
    return f'{hours}h {minutes}m {rest:.2f}s'


def parse_duration(text: str) -> float:
    """
    Parse a duration produced by :func:`format_duration` back into seconds.

    Raises:
        ValueError: if ``text`` contains no recognisable duration
    """
    parts = _DURATION_PART.findall(text)
    if not parts:
        raise ValueError(f'Not a duration: {text!r}')
    return sum(float(value) * _DURATION_UNITS[unit] for value, unit in parts)


class FileScanResult(BaseModel):
    """Outcome of scanning one log file"""

    path: str = Field(..., example='/var/log/nginx/access.log')
    total_bytes: int = Field(..., example=1500, description='Sum of sizes matched in this file')
    matched_lines: int = Field(0, example=12, description='Lines carrying a parsable size, zero included')
    line_count: int = Field(0, example=40, description='Lines read')
    time: float = Field(..., example=0.012, description='Scan duration in seconds')


class FileError(BaseModel):
    """A file that could not be scanned"""

    path: str = Field(..., example='/var/log/nginx/access.log.1')
    error: str = Field(..., example='Permission denied')


class ScanResponse(BaseModel):
    """Aggregate result of scanning a log directory

    Attributes:
        path: Directory that was scanned
        pattern: Name of the size pattern used
        regex: Regex source of the size pattern
        workers: Number of worker threads used
        time: Wall-clock duration of the scan in seconds
        total_bytes: Sum of sizes across all scanned files
        files: Per-file results, sorted by path
        errors: Files that failed (keep-going mode only)
        incomplete: True when the deadline fired before every file finished
        pending: Files not scanned because of the deadline
    """

    path: str = Field(..., example='/var/log/nginx')
    pattern: str = Field(..., example='ok')
    regex: str = Field(..., example=r'HTTP/1\.1" 200 (\d+)')
    workers: int = Field(..., example=6)
    time: float = Field(..., example=0.123)
    total_bytes: int = Field(..., example=4500)
    files: list[FileScanResult] = Field(default_factory=list)
    errors: list[FileError] = Field(default_factory=list)
    incomplete: bool = False
    pending: list[str] = Field(default_factory=list)

    @property
    def total_gb(self) -> float:
        return bytes_to_gb(self.total_bytes)

    @property
    def scanned_count(self) -> int:
        return len(self.files)

    def to_cli(self) -> str:
        """Format response for CLI output"""
        lines = [
            f'Total size: {self.total_gb:.2f} GB',
            f'Time elapsed: {format_duration(self.time)}',
        ]
        if self.incomplete:
            lines.append(f'Incomplete: {len(self.pending)} file(s) not scanned before the deadline')
        for err in self.errors:
            lines.append(f'Error: {err.path}: {err.error}')
        return '\n'.join(lines)
