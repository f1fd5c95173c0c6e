"""Resource-bound sequences - lazy cursors that release what they hold exactly once."""

__version__ = "0.1.0"

from .consuming import collect, copied, for_each, iterate, opened
from .errors import (
    AcquisitionError,
    BackingIOError,
    SequenceError,
    UnsupportedOperationError,
    UseAfterReleaseError,
)
from .file_sequences import LineFileSequence, ParquetRowSequence, write_rows
from .memory_sequences import ArraySequence, CountingSequence, ValueSequence, ValueState
from .models import LoopOutcome, SequenceStatus, Step
from .resources import MemoryBuffer, ReleaseTracker, SharedHandle
from .sequence_interface import ResourceBoundSequence, SequenceState

__all__ = [
    # Core
    "ResourceBoundSequence",
    "SequenceState",
    "Step",
    "SequenceStatus",
    "LoopOutcome",
    # Producers
    "ArraySequence",
    "CountingSequence",
    "ValueSequence",
    "ValueState",
    "LineFileSequence",
    "ParquetRowSequence",
    "write_rows",
    # Consuming loops
    "opened",
    "copied",
    "for_each",
    "collect",
    "iterate",
    # Resources
    "MemoryBuffer",
    "SharedHandle",
    "ReleaseTracker",
    # Errors
    "SequenceError",
    "AcquisitionError",
    "UseAfterReleaseError",
    "UnsupportedOperationError",
    "BackingIOError",
]
