"""File-backed sequence producers.

Both producers here read forward-only streams and do not support reset.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import pyarrow as pa
import pyarrow.parquet as pq

from .errors import BackingIOError
from .models import Step
from .resources import ReleaseTracker
from .sequence_interface import ResourceBoundSequence, SequenceState

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_END = object()


class LineFileSequence(ResourceBoundSequence):
    """Yields the lines of a text file, without their line terminators.

    Each traversal opens its own file handle; releasing the state closes it,
    after which the file can be deleted.
    """

    def __init__(
        self,
        path: PathLike,
        encoding: str = "utf-8",
        tracker: Optional[ReleaseTracker] = None,
    ):
        """Initialize the line reader.

        Args:
            path: Path of the newline-delimited text file
            encoding: Text encoding of the file
            tracker: Optional release tracker
        """
        self.path = Path(path)
        self.encoding = encoding
        self.tracker = tracker

    def _acquire(self):
        logger.debug(f"Opening {self.path} for line reading")
        return open(self.path, "r", encoding=self.encoding)

    def _next(self, state: SequenceState) -> Step:
        line = state.resource.readline()
        if line == "":
            return Step.end()
        return Step(item=line.rstrip("\n"), has_more=True)


class ParquetRowSource:
    """Open Parquet file streamed as rows, one record batch at a time."""

    def __init__(self, path: Path, batch_size: int, columns: Optional[List[str]] = None):
        self._file = open(path, "rb")
        try:
            self.parquet_file = pq.ParquetFile(self._file)
        except Exception:
            self._file.close()
            raise
        self._batches = self.parquet_file.iter_batches(batch_size=batch_size, columns=columns)
        self._rows: Iterator[Dict[str, Any]] = iter(())

    @property
    def closed(self) -> bool:
        return self._file.closed

    def next_row(self) -> Any:
        """Return the next row as a dict, or the end sentinel."""
        row = next(self._rows, _END)
        while row is _END:
            batch = next(self._batches, None)
            if batch is None:
                return _END
            self._rows = iter(batch.to_pylist())
            row = next(self._rows, _END)
        return row

    def close(self) -> None:
        try:
            self.parquet_file.close()
        finally:
            self._file.close()


class ParquetRowSequence(ResourceBoundSequence):
    """Yields the rows of a Parquet file as dicts.

    Rows are read through PyArrow in record batches of ``batch_size`` rows,
    so only one batch is in memory at a time.
    """

    def __init__(
        self,
        path: PathLike,
        batch_size: int = 1024,
        columns: Optional[List[str]] = None,
        tracker: Optional[ReleaseTracker] = None,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.path = Path(path)
        self.batch_size = batch_size
        self.columns = columns
        self.tracker = tracker

    def _acquire(self) -> ParquetRowSource:
        logger.debug(f"Opening Parquet file {self.path} (batch size {self.batch_size})")
        return ParquetRowSource(self.path, self.batch_size, self.columns)

    def _next(self, state: SequenceState) -> Step:
        try:
            row = state.resource.next_row()
        except pa.ArrowException as e:
            raise BackingIOError(f"{self.name} failed while reading {self.path}: {e}") from e
        if row is _END:
            return Step.end()
        return Step(item=row, has_more=True)


def write_rows(path: PathLike, rows: List[Dict[str, Any]], compression: str = "snappy") -> Path:
    """Write rows to a Parquet file.

    Args:
        path: Output path
        rows: Rows as dicts sharing the same keys
        compression: Compression codec

    Returns:
        Path of the written file
    """
    if not rows:
        raise ValueError("No rows to write")

    output_path = Path(path)
    table = pa.Table.from_pylist(rows)
    pq.write_table(table, str(output_path), compression=compression)
    logger.info(f"Wrote {table.num_rows} rows to {output_path}")
    return output_path
