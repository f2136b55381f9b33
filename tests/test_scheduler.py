"""Tests for the parallel scan scheduler."""

import os
import threading
import time
from time import perf_counter

import pytest

from conftest import access_line
from logsize import scheduler
from logsize.exceptions import DirectoryReadError, FileScanError
from logsize.models import FileScanResult
from logsize.patterns import ImageGetPattern, OkResponsePattern
from logsize.scheduler import DEFAULT_MAX_WORKERS, ConcurrencyStrategy, scan_directory, scan_files


STRATEGIES = [
    ConcurrencyStrategy.bounded(1),
    ConcurrencyStrategy.bounded(DEFAULT_MAX_WORKERS),
    ConcurrencyStrategy.unbounded(),
]


def build_log_dir(directory, write_log, file_count: int = 20, lines_per_file: int = 200) -> tuple[list[str], int]:
    """Write ``file_count`` logs with known sizes; return (paths, expected total)."""
    paths = []
    expected = 0
    for i in range(file_count):
        lines = []
        for j in range(lines_per_file):
            size = (i + 1) * 1000 + j
            if j % 5 == 0:
                lines.append(access_line(f'/missing/{j}', size, status=404))
            elif j % 7 == 0:
                lines.append('malformed line\n')
            else:
                lines.append(access_line(f'/page/{j}.html', size))
                expected += size
        paths.append(write_log(directory, f'access-{i:02d}.log', lines))
    return paths, expected


class TestConcurrencyStrategy:
    """Worker counts for bounded and unbounded strategies."""

    def test_default_is_bounded_six(self):
        strategy = ConcurrencyStrategy()
        assert strategy.max_workers == 6
        assert strategy.is_bounded

    def test_bounded_worker_count(self):
        strategy = ConcurrencyStrategy.bounded(6)
        assert strategy.worker_count(10) == 6
        assert strategy.worker_count(3) == 3
        assert strategy.worker_count(0) == 0

    def test_unbounded_worker_count(self):
        strategy = ConcurrencyStrategy.unbounded()
        assert not strategy.is_bounded
        assert strategy.worker_count(25) == 25
        assert strategy.worker_count(0) == 0

    def test_rejects_empty_pool(self):
        with pytest.raises(ValueError):
            ConcurrencyStrategy.bounded(0)

    def test_str(self):
        assert str(ConcurrencyStrategy.bounded(3)) == 'bounded(3)'
        assert str(ConcurrencyStrategy.unbounded()) == 'unbounded'


class TestScanFiles:
    """Aggregation across files."""

    def setup_method(self):
        self.pattern = OkResponsePattern()

    @pytest.mark.parametrize('strategy', STRATEGIES, ids=str)
    def test_total_is_exact_sum(self, tmp_path, write_log, strategy):
        paths, expected = build_log_dir(tmp_path, write_log)

        response = scan_files(paths, self.pattern, strategy=strategy)
        assert response.total_bytes == expected
        assert response.workers == strategy.worker_count(len(paths))
        assert not response.incomplete
        assert response.errors == []

    def test_every_file_scanned_once(self, tmp_path, write_log):
        paths, _ = build_log_dir(tmp_path, write_log, file_count=9, lines_per_file=10)

        response = scan_files(paths, self.pattern, strategy=ConcurrencyStrategy.bounded(4))
        assert [r.path for r in response.files] == sorted(paths)
        assert sum(r.total_bytes for r in response.files) == response.total_bytes

    def test_totals_identical_across_strategies_and_runs(self, tmp_path, write_log):
        paths, expected = build_log_dir(tmp_path, write_log, file_count=30, lines_per_file=100)

        totals = {
            scan_files(paths, self.pattern, strategy=strategy).total_bytes for strategy in STRATEGIES for _ in range(5)
        }
        assert totals == {expected}

    def test_no_files(self):
        response = scan_files([], self.pattern)
        assert response.total_bytes == 0
        assert response.workers == 0
        assert response.files == []

    def test_no_matching_lines(self, tmp_path, write_log):
        paths = [
            write_log(tmp_path, 'a.log', [access_line('/x', 10, status=500), 'noise\n']),
            write_log(tmp_path, 'b.log', ['noise\n']),
        ]
        response = scan_files(paths, self.pattern)
        assert response.total_bytes == 0
        assert len(response.files) == 2

    def test_response_describes_pattern(self, tmp_path, write_log):
        paths = [write_log(tmp_path, 'a.log', [access_line('/a.png', 10)])]
        response = scan_files(paths, ImageGetPattern(), path=str(tmp_path))
        assert response.pattern == 'images'
        assert response.regex == ImageGetPattern.REGEX.pattern
        assert response.path == str(tmp_path)
        assert response.total_bytes == 10


class TestFileErrors:
    """Keep-going records failures; fail-fast aborts."""

    def setup_method(self):
        self.pattern = OkResponsePattern()

    def test_keep_going_records_error(self, tmp_path, write_log):
        good = write_log(tmp_path, 'good.log', [access_line('/a', 100), access_line('/b', 200)])
        missing = os.path.join(str(tmp_path), 'rotated-away.log')

        response = scan_files([good, missing], self.pattern)
        assert response.total_bytes == 300
        assert [r.path for r in response.files] == [good]
        assert len(response.errors) == 1
        assert response.errors[0].path == missing
        assert 'No such file' in response.errors[0].error

    def test_fail_fast_raises(self, tmp_path, write_log):
        good = write_log(tmp_path, 'good.log', [access_line('/a', 100)])
        missing = os.path.join(str(tmp_path), 'rotated-away.log')

        with pytest.raises(FileScanError) as exc_info:
            scan_files([good, missing], self.pattern, fail_fast=True)
        assert exc_info.value.path == missing


class TestDeadline:
    """A timeout reports a partial total flagged as incomplete."""

    def test_timeout_marks_incomplete(self, tmp_path, write_log, monkeypatch):
        fast = write_log(tmp_path, 'a.log', [access_line('/a', 100)])
        slow = write_log(tmp_path, 'b.log', [access_line('/b', 200)])
        queued = write_log(tmp_path, 'c.log', [access_line('/c', 300)])

        started = []
        real_scan_file = scheduler.scan_file

        def blocking_scan_file(path, pattern, cancel=None):
            started.append(path)
            if path == slow:
                cancel.wait(timeout=10)
            return real_scan_file(path, pattern, cancel=cancel)

        monkeypatch.setattr(scheduler, 'scan_file', blocking_scan_file)
        start = perf_counter()
        response = scan_files(
            [fast, slow, queued], OkResponsePattern(), strategy=ConcurrencyStrategy.bounded(1), timeout=0.5
        )
        elapsed = perf_counter() - start

        assert response.incomplete
        assert response.total_bytes == 100
        assert response.pending == [slow, queued]
        assert [r.path for r in response.files] == [fast]
        assert queued not in started
        assert 'Incomplete: 2 file(s)' in response.to_cli()
        assert elapsed < 5

    def test_running_scans_stop_at_deadline(self, tmp_path, write_log):
        lines = [access_line(f'/page/{i}', 1) for i in range(50)]
        paths = [write_log(tmp_path, f'{i}.log', lines) for i in range(3)]

        class SlowPattern(OkResponsePattern):
            def match_size(self, line):
                time.sleep(0.05)
                return super().match_size(line)

        start = perf_counter()
        response = scan_files(paths, SlowPattern(), strategy=ConcurrencyStrategy.unbounded(), timeout=0.3)
        elapsed = perf_counter() - start

        assert response.incomplete
        assert response.total_bytes == 0
        assert response.pending == sorted(paths)
        # every line takes 50ms, a full file 2.5s
        assert elapsed < 2
        assert not [t for t in threading.enumerate() if t.name.startswith('logsize')]

    def test_generous_timeout_completes(self, tmp_path, write_log):
        paths = [write_log(tmp_path, f'{i}.log', [access_line('/a', 10)]) for i in range(4)]
        response = scan_files(paths, OkResponsePattern(), timeout=30)
        assert not response.incomplete
        assert response.pending == []
        assert response.total_bytes == 40


class TestScanDirectory:
    """Listing plus scanning."""

    def test_example_directory(self, tmp_path, write_log):
        write_log(tmp_path, 'access.log', ['"GET /a.jpg HTTP/1.1" 200 1500\n', '"GET /b.html HTTP/1.1" 200 3000\n'])

        assert scan_directory(str(tmp_path), ImageGetPattern()).total_bytes == 1500
        assert scan_directory(str(tmp_path), OkResponsePattern()).total_bytes == 4500

    def test_ignores_subdirectories(self, tmp_path, write_log):
        write_log(tmp_path, 'access.log', [access_line('/a', 10)])
        nested = tmp_path / 'old'
        nested.mkdir()
        write_log(nested, 'access.log', [access_line('/a', 1000)])

        response = scan_directory(str(tmp_path), OkResponsePattern())
        assert response.total_bytes == 10
        assert response.path == str(tmp_path)

    def test_empty_directory(self, tmp_path):
        response = scan_directory(str(tmp_path), OkResponsePattern())
        assert response.total_bytes == 0
        assert not response.incomplete

    def test_missing_directory(self, tmp_path, monkeypatch):
        calls = []
        monkeypatch.setattr(scheduler, 'scan_file', lambda path, pattern, cancel=None: calls.append(path))

        with pytest.raises(DirectoryReadError):
            scan_directory(str(tmp_path / 'nope'), OkResponsePattern())
        assert calls == []

    def test_results_are_file_scan_results(self, tmp_path, write_log):
        write_log(tmp_path, 'access.log', [access_line('/a', 10)])
        response = scan_directory(str(tmp_path), OkResponsePattern())
        assert all(isinstance(r, FileScanResult) for r in response.files)
