"""Demonstration programs: does the consuming loop release the cursor?

Each ``run_*`` function prints what happens to the resource held by one
kind of sequence and returns a process exit code.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Optional

from .consuming import copied, for_each, opened
from .file_sequences import LineFileSequence, ParquetRowSequence, write_rows
from .memory_sequences import ArraySequence, CountingSequence, ValueSequence
from .protocols import LoggerProtocol
from .resources import ReleaseTracker

DEMO_LINES = ["alpha", "beta", "gamma"]

DEMO_ROWS = [
    {"id": 1, "word": "alpha"},
    {"id": 2, "word": "beta"},
    {"id": 3, "word": "gamma"},
    {"id": 4, "word": "delta"},
    {"id": 5, "word": "epsilon"},
]


def _print_item(item) -> None:
    print(f"  {item}")


def _delete_demo_file(path: Path) -> bool:
    """Delete a demo file; failure means something still holds it open."""
    try:
        os.remove(path)
    except OSError as e:
        print(f"Could not delete file (likely not released): {e}")
        return False
    return True


def run_disposable_demo() -> int:
    """Disposable cursor over ``{1, 2, 3}``, released by the loop and by hand."""
    tracker = ReleaseTracker(
        on_release=lambda name: print(f"{name}.release() called")
    )

    print("for_each over a disposable cursor (for_each calls release):")
    for_each(ArraySequence([1, 2, 3], tracker=tracker), _print_item)

    print()
    print("Manual while loop (must call release yourself):")
    sequence = ArraySequence([1, 2, 3], tracker=tracker)
    state = sequence.open()
    try:
        while True:
            step = sequence.advance(state)
            if not step.has_more:
                break
            print(f"  {step.item}")
    finally:
        sequence.release(state)

    print(f"\n✅ Release calls = {tracker.released}")
    return 0 if tracker.outstanding == 0 else 1


def run_non_disposable_demo() -> int:
    """Counting cursor with no resource: no release hook runs."""
    print("for_each over a cursor that holds no resource:")
    outcome = for_each(CountingSequence(3), _print_item)
    print("No release() message expected.")

    print(f"\n✅ Loop ended {outcome.status.value}, state released = {outcome.released}, nothing to free")
    return 0


def run_value_demo(copies: int = 3) -> int:
    """Value-semantics cursor: producer copies and cursor copies."""
    tracker = ReleaseTracker(
        on_release=lambda name: print(f"{name}.release() called")
    )
    sequence = ValueSequence(count=2, tracker=tracker)

    print("for_each over a value-semantics cursor:")
    for_each(sequence, _print_item)
    print(f"Release calls = {tracker.released}")

    print(f"\nIterating {copies} copies of the producer independently:")
    for producer in [copy.copy(sequence) for _ in range(copies)]:
        for_each(producer, _print_item)
    print(f"Release calls = {tracker.released}")

    print("\nCopying the cursor mid-iteration (copies share one reference-counted handle):")
    before = tracker.released
    with opened(sequence) as state:
        first = sequence.advance(state)
        print(f"  original -> {first.item}")
        with copied(sequence, state) as twin:
            print(f"  copy     -> {sequence.advance(twin).item}")
        print(f"  original -> {sequence.advance(state).item}")
    print(f"Resource freed {tracker.released - before} time(s) for 2 cursors")

    expected = 1 + copies + 1
    print(f"\n✅ Release calls = {tracker.released} (expected {expected})")
    return 0 if tracker.released == expected else 1


def run_line_reader_demo(path: Path = Path("demo_lines.txt"), logger: Optional[LoggerProtocol] = None) -> int:
    """Line reader over a three-line file, then delete the file."""
    logger = logger or logging.getLogger(__name__)
    path = Path(path)

    with open(path, "w", encoding="utf-8", newline="\n") as f:
        for line in DEMO_LINES:
            f.write(line + "\n")
    logger.debug(f"Wrote {len(DEMO_LINES)} lines to {path}")

    tracker = ReleaseTracker(
        on_release=lambda name: print("Closing file via for_each release...")
    )

    print("Reading lines with for_each (will auto-close):")
    try:
        for_each(LineFileSequence(path, tracker=tracker), _print_item)
    except Exception:
        _delete_demo_file(path)
        raise

    if not _delete_demo_file(path):
        return 1

    print("✅ File successfully deleted after for_each (released).")
    return 0


def run_parquet_demo(
    path: Path = Path("demo_rows.parquet"),
    batch_size: int = 2,
    stop_after: int = 3,
    logger: Optional[LoggerProtocol] = None,
) -> int:
    """Parquet row reader stopped early; the file is closed regardless."""
    logger = logger or logging.getLogger(__name__)
    path = Path(path)

    write_rows(path, DEMO_ROWS)
    tracker = ReleaseTracker(
        on_release=lambda name: print("Closing Parquet file via for_each release...")
    )

    print(f"Reading rows in batches of {batch_size}, stopping after {stop_after}:")
    seen = []

    def show(row) -> bool:
        seen.append(row)
        print(f"  {row}")
        return len(seen) < stop_after

    try:
        outcome = for_each(ParquetRowSequence(path, batch_size=batch_size, tracker=tracker), show)
    except Exception:
        _delete_demo_file(path)
        raise
    logger.debug(f"Parquet loop ended {outcome.status.value} after {outcome.items_seen} rows")

    if not _delete_demo_file(path):
        return 1

    print(f"✅ Stopped early = {outcome.stopped_early}, file deleted after release.")
    return 0
