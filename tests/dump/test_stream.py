"""Tests for the single-pass dump filter."""

import io
import sys
from contextlib import contextmanager, nullcontext

import pytest
from rich.console import Console

from dump_filter.core.logging import configure_logging
from dump_filter.dump.stream import FilterConfig, filter_dump, filter_dump_file
from dump_filter.dump.timing import TimingFormat, TimingSink

THREE_LINES = [
    b"CREATE TABLE `t1` (...);\n",
    b"INSERT INTO `t1` VALUES (1);\n",
    b"UNLOCK TABLES;\n",
]


def run(lines, excluded=(), fmt=None, clock=None, progress=None):
    """Run filter_dump over ``lines``; return (stdout bytes, log text, stats)."""
    output = io.BytesIO()
    log = io.StringIO()
    sink = None
    if fmt is not None:
        sink = TimingSink(Console(file=log, color_system=None), fmt)
    kwargs = {"clock": clock} if clock is not None else {}
    stats = filter_dump(
        lines,
        output,
        FilterConfig(excluded_tables=frozenset(excluded)),
        sink=sink,
        progress=progress,
        **kwargs,
    )
    return output.getvalue(), log.getvalue(), stats


class RecordingProgress:
    """Progress observer recording every call."""

    def __init__(self):
        self.bytes = 0
        self.events: list[tuple] = []

    def advance(self, nbytes):
        self.bytes += nbytes

    def table_started(self, table_name, skipped):
        self.events.append(("table", table_name, skipped))

    def table_finished(self):
        self.events.append(("idle",))

    def suspend(self):
        return nullcontext()

    def close(self):
        self.events.append(("close",))


class SuspendTrackingProgress(RecordingProgress):
    """Recording observer that knows whether output is currently allowed."""

    def __init__(self):
        super().__init__()
        self.suspended = False
        self.suspend_calls = 0

    @contextmanager
    def suspend(self):
        self.suspend_calls += 1
        self.suspended = True
        try:
            yield
        finally:
            self.suspended = False


class BarAwareStream(io.StringIO):
    """stderr stand-in that remembers writes made while the bar was drawn."""

    def __init__(self, progress):
        super().__init__()
        self.progress = progress
        self.unscoped: list[str] = []

    def write(self, s):
        if not self.progress.suspended:
            self.unscoped.append(s)
        return super().write(s)


def split_lines(data: bytes) -> list[bytes]:
    return io.BytesIO(data).readlines()


class TestForwarding:
    """Tests for which lines reach the output."""

    def test_excluded_insert_removed(self):
        out, _, stats = run(THREE_LINES, excluded={"t1"})
        assert out == THREE_LINES[0] + THREE_LINES[2]
        assert stats.lines_dropped == 1
        assert stats.lines_forwarded == 2

    def test_empty_exclusion_is_byte_identical(self, sample_dump):
        out, _, stats = run(split_lines(sample_dump))
        assert out == sample_dump
        assert stats.lines_dropped == 0
        assert stats.bytes_read == stats.bytes_written == len(sample_dump)

    def test_removes_exactly_the_excluded_inserts(self, sample_dump):
        out, _, _ = run(split_lines(sample_dump), excluded={"users"})
        expected = b"".join(
            line
            for line in split_lines(sample_dump)
            if not line.startswith(b"INSERT INTO `users`")
        )
        assert out == expected
        assert b"CREATE TABLE `users` (\n" in out
        assert b"INSERT INTO `audit_log`" in out

    def test_non_utf8_bytes_forwarded_unchanged(self, sample_dump):
        out, _, _ = run(split_lines(sample_dump), excluded={"users"})
        assert b"(2,'\xff')" in out

    def test_filtering_is_idempotent(self, sample_dump):
        once, _, _ = run(split_lines(sample_dump), excluded={"audit_log"})
        twice, _, _ = run(split_lines(once), excluded={"audit_log"})
        assert once == twice

    def test_last_line_without_newline(self):
        lines = [b"CREATE TABLE `t1` (\n", b"INSERT INTO `t1` VALUES (1);"]
        out, _, _ = run(lines)
        assert out == b"".join(lines)

    def test_malformed_create_is_forwarded(self):
        out, log, stats = run([b"CREATE TABLE\n"], fmt=TimingFormat.DEFAULT)
        assert out == b"CREATE TABLE\n"
        assert log == ""
        assert stats.tables_seen == 0

    def test_empty_input(self):
        out, log, stats = run([], fmt=TimingFormat.DEFAULT)
        assert out == b""
        assert log == ""
        assert stats.lines_read == 0


class TestTimingOutput:
    """Tests for timing records written during the pass."""

    def test_csv_records_in_order(self, clock):
        _, log, stats = run(THREE_LINES, fmt=TimingFormat.CSV, clock=clock)
        assert log.splitlines() == ["CREATE,t1,250", "INSERT,t1,250"]
        assert stats.observations == 2

    def test_default_records(self, clock):
        _, log, _ = run(THREE_LINES, fmt=TimingFormat.DEFAULT, clock=clock)
        assert log.splitlines() == [
            "CREATE TABLE t1 took 250 ms",
            "INSERT INTO t1 took 250 ms",
        ]

    def test_real_clock_durations_are_non_negative(self):
        _, log, _ = run(THREE_LINES, fmt=TimingFormat.CSV)
        records = [line.split(",") for line in log.splitlines()]
        assert [r[:2] for r in records] == [["CREATE", "t1"], ["INSERT", "t1"]]
        assert all(int(r[2]) >= 0 for r in records)

    def test_excluded_table_only_logs_create(self, clock):
        _, log, _ = run(THREE_LINES, excluded={"t1"}, fmt=TimingFormat.CSV, clock=clock)
        assert log.splitlines() == ["CREATE,t1,250"]

    def test_unclosed_phase_closed_at_end(self, clock):
        _, log, _ = run(THREE_LINES[:2], fmt=TimingFormat.CSV, clock=clock)
        assert log.splitlines() == ["CREATE,t1,250", "INSERT,t1,250"]

    def test_no_sink_writes_nothing(self, sample_dump):
        _, log, stats = run(split_lines(sample_dump))
        assert log == ""
        assert stats.observations == 0

    def test_sample_dump_records(self, sample_dump, clock):
        _, log, stats = run(split_lines(sample_dump), fmt=TimingFormat.CSV, clock=clock)
        kinds = [line.rsplit(",", 1)[0] for line in log.splitlines()]
        assert kinds == ["CREATE,users", "INSERT,users", "CREATE,audit_log", "INSERT,audit_log"]
        assert stats.tables_seen == 2


class TestProgressReporting:
    """Tests for progress observer notifications."""

    def test_progress_events(self, sample_dump):
        progress = RecordingProgress()
        run(split_lines(sample_dump), excluded={"audit_log"}, progress=progress)
        assert progress.bytes == len(sample_dump)
        assert progress.events == [
            ("table", "users", False),
            ("idle",),
            ("table", "audit_log", True),
            ("idle",),
        ]

    def test_progress_does_not_change_output(self, sample_dump):
        without, _, _ = run(split_lines(sample_dump), excluded={"users"})
        with_progress, _, _ = run(
            split_lines(sample_dump), excluded={"users"}, progress=RecordingProgress()
        )
        assert without == with_progress

    def test_debug_log_written_inside_suspend(self):
        progress = SuspendTrackingProgress()
        stderr = BarAwareStream(progress)
        saved = sys.stderr
        sys.stderr = stderr
        try:
            configure_logging(log_level="DEBUG", color=False)
            run([THREE_LINES[0]], progress=progress)
        finally:
            sys.stderr = saved
            configure_logging()

        assert "table_definition_started" in stderr.getvalue()
        assert stderr.unscoped == []
        assert progress.suspend_calls == 1

    def test_no_suspend_without_debug_logging(self, sample_dump):
        configure_logging()
        progress = SuspendTrackingProgress()
        run(split_lines(sample_dump), progress=progress)
        assert progress.suspend_calls == 0


class TestFilterDumpFile:
    """Tests for reading from a path."""

    def test_reads_whole_file(self, dump_file, sample_dump):
        output = io.BytesIO()
        stats = filter_dump_file(dump_file, output, FilterConfig(read_buffer_size=16))
        assert output.getvalue() == sample_dump
        assert stats.lines_read == len(split_lines(sample_dump))

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            filter_dump_file(tmp_path / "missing.sql", io.BytesIO(), FilterConfig())

    def test_write_error_propagates(self, dump_file):
        class BrokenOutput(io.BytesIO):
            def write(self, data):
                raise BrokenPipeError("closed")

        with pytest.raises(BrokenPipeError):
            filter_dump_file(dump_file, BrokenOutput(), FilterConfig())
