"""Exception hierarchy for resource-bound sequences."""


class SequenceError(Exception):
    """Base class for all sequence errors."""


class AcquisitionError(SequenceError):
    """The resource backing a sequence could not be obtained."""


class UseAfterReleaseError(SequenceError):
    """An operation was attempted on a state whose resource was released."""

    def __init__(self, operation: str, sequence_name: str):
        super().__init__(
            f"Cannot {operation}: {sequence_name} state has already been released"
        )
        self.operation = operation
        self.sequence_name = sequence_name


class UnsupportedOperationError(SequenceError):
    """The producer cannot perform the requested operation."""


class BackingIOError(UnsupportedOperationError):
    """The underlying stream failed while producing the next item.

    Raised from ``advance`` instead of reporting end-of-sequence.
    """
