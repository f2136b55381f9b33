"""Per-file scan task: sum the sizes matched in one log file"""

import logging
import threading
from time import perf_counter

from logsize.exceptions import FileScanError, ScanCancelledError
from logsize.models import FileScanResult, format_duration
from logsize.patterns import SizePattern


logger = logging.getLogger(__name__)


def scan_file(path: str, pattern: SizePattern, cancel: threading.Event | None = None) -> FileScanResult:
    """
    Scan a single log file and sum every size ``pattern`` extracts from it.

    Lines are decoded as UTF-8 with undecodable bytes replaced; size fields
    are plain ASCII so a replaced byte never turns into a match.

    Args:
        path: Path to the log file
        pattern: Size pattern applied to each line
        cancel: Checked before every line; once set the scan stops

    Returns:
        FileScanResult with the per-file sum

    Raises:
        FileScanError: if the file cannot be opened or a read fails
        ScanCancelledError: if ``cancel`` was set before the file was finished
    """
    start_time = perf_counter()
    total_bytes = 0
    matched_lines = 0
    line_count = 0

    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            logger.info(f'🏁 Started processing {path}')
            for line in f:
                if cancel is not None and cancel.is_set():
                    logger.debug(f'Stopped {path} after {line_count:,} lines')
                    raise ScanCancelledError(path)
                line_count += 1
                size = pattern.match_size(line)
                if size is not None:
                    total_bytes += size
                    matched_lines += 1
    except OSError as e:
        raise FileScanError(path, e) from e

    elapsed = perf_counter() - start_time
    logger.info(f'✅ File {path} processed in {format_duration(elapsed)}')
    logger.debug(f'{path}: {matched_lines:,}/{line_count:,} lines matched, {total_bytes:,} bytes')

    return FileScanResult(
        path=path,
        total_bytes=total_bytes,
        matched_lines=matched_lines,
        line_count=line_count,
        time=elapsed,
    )
