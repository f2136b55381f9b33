"""Multi-file scan scheduler: fan files out to worker threads and sum the results"""

import logging
import threading
from concurrent import futures
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from time import perf_counter

from logsize.exceptions import FileScanError
from logsize.lister import list_log_files
from logsize.models import FileError, FileScanResult, ScanResponse
from logsize.patterns import SizePattern
from logsize.scanner import scan_file


DEFAULT_MAX_WORKERS = 6

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConcurrencyStrategy:
    """How many worker threads scan files at once.

    ``max_workers=None`` means unbounded: one thread per file, all started
    immediately. An integer caps the pool at ``min(max_workers, file_count)``
    and queues the remaining files.
    """

    max_workers: int | None = DEFAULT_MAX_WORKERS

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f'max_workers must be at least 1, got {self.max_workers}')

    @classmethod
    def unbounded(cls) -> 'ConcurrencyStrategy':
        return cls(max_workers=None)

    @classmethod
    def bounded(cls, max_workers: int = DEFAULT_MAX_WORKERS) -> 'ConcurrencyStrategy':
        return cls(max_workers=max_workers)

    @property
    def is_bounded(self) -> bool:
        return self.max_workers is not None

    def worker_count(self, file_count: int) -> int:
        """Number of threads used for ``file_count`` files."""
        if file_count <= 0:
            return 0
        if self.max_workers is None:
            return file_count
        return min(self.max_workers, file_count)

    def __str__(self) -> str:
        return f'bounded({self.max_workers})' if self.is_bounded else 'unbounded'


def scan_files(
    files: list[str],
    pattern: SizePattern,
    strategy: ConcurrencyStrategy | None = None,
    fail_fast: bool = False,
    timeout: float | None = None,
    path: str = '',
) -> ScanResponse:
    """
    Scan every file in parallel and sum the sizes they contain.

    Each file becomes one task. Workers return their per-file sum and only
    this thread adds it to the total, so no counter is shared between
    threads. The response is built once every task has finished or the
    deadline has passed.

    Args:
        files: Paths to scan, each exactly once
        pattern: Size pattern shared by all workers
        strategy: Concurrency strategy (default: pool of 6)
        fail_fast: Re-raise the first file error and cancel queued files.
            When False, failures are recorded in ``errors`` and scanning
            continues.
        timeout: Seconds before the scan stops. Queued files are cancelled,
            running ones stop at their next line, and the response is
            marked incomplete.
        path: Directory the files came from, echoed in the response

    Returns:
        ScanResponse with the total and per-file results

    Raises:
        FileScanError: on the first failing file when ``fail_fast`` is set
    """
    strategy = strategy or ConcurrencyStrategy()
    workers = strategy.worker_count(len(files))
    start_time = perf_counter()

    results: list[FileScanResult] = []
    errors: list[FileError] = []
    pending: list[str] = []
    total_bytes = 0
    timed_out = False

    if files:
        logger.debug(f'Scanning {len(files)} files with {workers} workers ({strategy}, pattern={pattern.name})')

        stop = threading.Event()
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix='logsize')
        future_to_file = {executor.submit(scan_file, f, pattern, cancel=stop): f for f in files}
        collected = set()
        try:
            for future in as_completed(future_to_file, timeout=timeout):
                filepath = future_to_file[future]
                collected.add(future)
                try:
                    file_result = future.result()
                except FileScanError as e:
                    if fail_fast:
                        logger.debug(f'Aborting scan after failure in {filepath}')
                        raise
                    logger.warning(str(e))
                    errors.append(FileError(path=filepath, error=e.reason))
                    continue

                total_bytes += file_result.total_bytes
                results.append(file_result)
                logger.debug(f'[{len(collected)}/{len(files)}] {filepath}: {file_result.total_bytes:,} bytes')
        except futures.TimeoutError:
            timed_out = True
            pending = sorted(f for fut, f in future_to_file.items() if fut not in collected)
            logger.warning(f'Deadline of {timeout}s reached with {len(pending)} file(s) unfinished')
        finally:
            # Queued tasks never start; running ones stop at their next line
            stop.set()
            executor.shutdown(wait=True, cancel_futures=True)

    elapsed = perf_counter() - start_time
    results.sort(key=lambda r: r.path)
    errors.sort(key=lambda e: e.path)

    return ScanResponse(
        path=path,
        pattern=pattern.name,
        regex=pattern.regex.pattern,
        workers=workers,
        time=elapsed,
        total_bytes=total_bytes,
        files=results,
        errors=errors,
        incomplete=timed_out,
        pending=pending,
    )


def scan_directory(
    directory: str,
    pattern: SizePattern,
    strategy: ConcurrencyStrategy | None = None,
    fail_fast: bool = False,
    timeout: float | None = None,
) -> ScanResponse:
    """List the files directly inside ``directory`` and scan them.

    Raises:
        DirectoryReadError: if the directory cannot be listed; nothing is scanned
        FileScanError: on the first failing file when ``fail_fast`` is set
    """
    files = list_log_files(directory)
    return scan_files(files, pattern, strategy=strategy, fail_fast=fail_fast, timeout=timeout, path=directory)
