"""Tests for file_sequences module."""

import os
import tempfile
from contextlib import closing
from pathlib import Path

import pytest

from resource_bound_sequence.consuming import collect, for_each, iterate, opened
from resource_bound_sequence.errors import (
    AcquisitionError,
    BackingIOError,
    UnsupportedOperationError,
    UseAfterReleaseError,
)
from resource_bound_sequence.file_sequences import (
    LineFileSequence,
    ParquetRowSequence,
    write_rows,
)
from resource_bound_sequence.models import SequenceStatus
from resource_bound_sequence.resources import ReleaseTracker

ROWS = [
    {"id": 1, "word": "alpha"},
    {"id": 2, "word": "beta"},
    {"id": 3, "word": "gamma"},
    {"id": 4, "word": "delta"},
    {"id": 5, "word": "epsilon"},
]


def _write_lines(path: Path, lines):
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        for line in lines:
            f.write(line + "\n")


def test_line_sequence_reads_lines_and_file_is_deletable():
    """Test reading a three-line file and deleting it after the loop."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "demo_lines.txt"
        _write_lines(path, ["alpha", "beta", "gamma"])

        tracker = ReleaseTracker()
        sequence = LineFileSequence(path, tracker=tracker)
        items = []

        with opened(sequence) as state:
            step = sequence.advance(state)
            while step.has_more:
                items.append(step.item)
                step = sequence.advance(state)
            handle = state.resource

        assert items == ["alpha", "beta", "gamma"]
        assert handle.closed
        assert tracker.released == 1

        os.remove(path)
        assert not path.exists()


def test_line_sequence_strips_crlf():
    """Test that Windows line endings are not part of the items."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "crlf.txt"
        path.write_bytes(b"one\r\ntwo\r\n")

        assert collect(LineFileSequence(path)) == ["one", "two"]


def test_line_sequence_last_line_without_newline():
    """Test that a final line without a terminator is still yielded."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "tail.txt"
        path.write_text("first\nlast", encoding="utf-8")

        assert collect(LineFileSequence(path)) == ["first", "last"]


def test_line_sequence_missing_file():
    """Test that a missing file fails acquisition without leaking anything."""
    tracker = ReleaseTracker()
    sequence = LineFileSequence("/nonexistent/demo_lines.txt", tracker=tracker)

    with pytest.raises(AcquisitionError, match="LineFileSequence") as exc_info:
        sequence.open()

    assert isinstance(exc_info.value.__cause__, FileNotFoundError)
    assert tracker.acquired == 0
    assert tracker.released == 0


def test_line_sequence_reset_unsupported():
    """Test that the forward-only reader refuses to rewind."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "lines.txt"
        _write_lines(path, ["alpha", "beta"])

        sequence = LineFileSequence(path)
        with opened(sequence) as state:
            sequence.advance(state)
            with pytest.raises(UnsupportedOperationError, match="reset"):
                sequence.reset(state)
            # cursor is untouched by the failed reset
            assert sequence.advance(state).item == "beta"


def test_line_sequence_decode_error_is_backing_error():
    """Test that a read failure is reported, not treated as end-of-sequence."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "broken.txt"
        path.write_bytes(b"alpha\n\xff\xfe\xfd\n")

        tracker = ReleaseTracker()
        sequence = LineFileSequence(path, tracker=tracker)

        with pytest.raises(BackingIOError, match="failed while reading"):
            for_each(sequence, lambda line: None)

        assert tracker.released == 1
        assert issubclass(BackingIOError, UnsupportedOperationError)


def test_line_sequence_errored_state():
    """Test that a backing failure moves the state to ERRORED."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "broken.txt"
        path.write_bytes(b"\xff\xfe\n")

        sequence = LineFileSequence(path)
        state = sequence.open()
        with pytest.raises(BackingIOError):
            sequence.advance(state)
        assert state.status == SequenceStatus.ERRORED

        sequence.release(state)
        assert state.resource.closed
        with pytest.raises(UseAfterReleaseError):
            sequence.advance(state)


def test_line_sequence_no_silent_end_after_backing_error():
    """Test that lines left after a read failure are never reported as the end."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "broken.txt"
        path.write_bytes(b"alpha\n\xff\xfe\nbeta\n")

        tracker = ReleaseTracker()
        sequence = LineFileSequence(path, tracker=tracker)

        with opened(sequence) as state:
            with pytest.raises(BackingIOError):
                sequence.advance(state)

            with pytest.raises(BackingIOError, match="errored on an earlier read"):
                sequence.advance(state)
            with pytest.raises(BackingIOError, match="reset"):
                sequence.reset(state)
            assert state.status == SequenceStatus.ERRORED

        assert tracker.released == 1


def test_line_sequence_early_break_with_iterate():
    """Test that closing the generator after a break closes the file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "lines.txt"
        _write_lines(path, ["alpha", "beta", "gamma"])

        tracker = ReleaseTracker()
        with closing(iterate(LineFileSequence(path, tracker=tracker))) as lines:
            for line in lines:
                if line == "beta":
                    break
            assert tracker.released == 0

        assert tracker.released == 1


def test_write_rows_creates_file():
    """Test writing demo rows to Parquet."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_rows(Path(tmpdir) / "rows.parquet", ROWS)
        assert path.exists()
        assert path.stat().st_size > 0


def test_write_rows_rejects_empty():
    """Test that writing no rows raises error."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ValueError, match="No rows"):
            write_rows(Path(tmpdir) / "rows.parquet", [])


def test_parquet_sequence_reads_rows_across_batches():
    """Test that rows come back in order across record batches."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_rows(Path(tmpdir) / "rows.parquet", ROWS)
        tracker = ReleaseTracker()

        items = collect(ParquetRowSequence(path, batch_size=2, tracker=tracker))

        assert items == ROWS
        assert tracker.released == 1


def test_parquet_sequence_column_projection():
    """Test reading a subset of columns."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_rows(Path(tmpdir) / "rows.parquet", ROWS)

        items = collect(ParquetRowSequence(path, columns=["word"]))

        assert items == [{"word": row["word"]} for row in ROWS]


def test_parquet_sequence_early_stop_closes_file():
    """Test that stopping early still closes the Parquet file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_rows(Path(tmpdir) / "rows.parquet", ROWS)
        tracker = ReleaseTracker()
        sequence = ParquetRowSequence(path, batch_size=2, tracker=tracker)

        with opened(sequence) as state:
            assert sequence.advance(state).item == ROWS[0]
            source = state.resource

        assert source.closed
        assert tracker.released == 1

        items = collect(sequence, limit=3)
        assert items == ROWS[:3]
        assert tracker.released == 2

        os.remove(path)


def test_parquet_sequence_reset_unsupported():
    """Test that the Parquet reader refuses to rewind."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = write_rows(Path(tmpdir) / "rows.parquet", ROWS)
        sequence = ParquetRowSequence(path)

        with opened(sequence) as state:
            with pytest.raises(UnsupportedOperationError):
                sequence.reset(state)


def test_parquet_sequence_missing_file():
    """Test that a missing Parquet file fails acquisition."""
    with pytest.raises(AcquisitionError):
        ParquetRowSequence("/nonexistent/rows.parquet").open()


def test_parquet_sequence_invalid_file():
    """Test that a file that is not Parquet fails acquisition."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "not_parquet.parquet"
        path.write_text("alpha\nbeta\n", encoding="utf-8")

        tracker = ReleaseTracker()
        with pytest.raises(AcquisitionError, match="ParquetRowSequence"):
            ParquetRowSequence(path, tracker=tracker).open()
        assert tracker.acquired == 0


def test_parquet_sequence_rejects_bad_batch_size():
    """Test that batch_size must be positive."""
    with pytest.raises(ValueError, match="batch_size"):
        ParquetRowSequence("rows.parquet", batch_size=0)
