"""In-memory sequence producers."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .errors import UseAfterReleaseError
from .models import Step
from .resources import MemoryBuffer, ReleaseTracker, SharedHandle
from .sequence_interface import ResourceBoundSequence, SequenceState


class ArraySequence(ResourceBoundSequence):
    """Disposable cursor over a fixed array of values.

    Every traversal copies the values into its own :class:`MemoryBuffer`,
    which is freed on release. Supports reset.
    """

    def __init__(self, values: Iterable[int], tracker: Optional[ReleaseTracker] = None):
        """Initialize the producer.

        Args:
            values: Values to yield, in order
            tracker: Optional release tracker
        """
        self._values = tuple(values)
        self.tracker = tracker

    def _acquire(self) -> MemoryBuffer:
        return MemoryBuffer(self._values)

    def _next(self, state: SequenceState) -> Step:
        buffer = state.resource
        if state.position < len(buffer):
            return Step(item=buffer[state.position], has_more=True)
        return Step.end()

    def _rewind(self, state: SequenceState) -> None:
        pass


class CountingSequence(ResourceBoundSequence):
    """Cursor that counts ``1..limit`` and holds no resource.

    Releasing its state never invokes a release hook.
    """

    holds_resource = False

    def __init__(self, limit: int = 3):
        if limit < 0:
            raise ValueError("limit must not be negative")
        self.limit = limit

    def _acquire(self) -> None:
        return None

    def _next(self, state: SequenceState) -> Step:
        if state.position < self.limit:
            return Step(item=state.position + 1, has_more=True)
        return Step.end()

    def _rewind(self, state: SequenceState) -> None:
        pass


@dataclass(eq=False)
class ValueState(SequenceState):
    """State with value semantics.

    ``copy.copy`` duplicates the cursor position and shares the handle; the
    copy owns one more reference, so each copy releases exactly once and
    the resource is freed when the last copy is released.
    """

    def __copy__(self) -> "ValueState":
        if self.released or self.handle is None:
            raise UseAfterReleaseError("copy", self.sequence_name)
        return ValueState(
            sequence_name=self.sequence_name,
            handle=self.handle.retain(),
            position=self.position,
            status=self.status,
        )


@dataclass(frozen=True)
class ValueSequence(ResourceBoundSequence):
    """Immutable producer counting ``1..count``.

    Copies of the producer compare equal and are independent: each
    ``open()`` acquires a fresh handle, so N copies iterated separately
    release N times.
    """

    count: int = 2
    tracker: Optional[ReleaseTracker] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.count < 0:
            raise ValueError("count must not be negative")

    def _acquire(self) -> MemoryBuffer:
        return MemoryBuffer(range(1, self.count + 1))

    def _new_state(self, handle: Optional[SharedHandle]) -> ValueState:
        return ValueState(sequence_name=self.name, handle=handle)

    def _next(self, state: SequenceState) -> Step:
        buffer = state.resource
        if state.position < len(buffer):
            return Step(item=buffer[state.position], has_more=True)
        return Step.end()

    def _rewind(self, state: SequenceState) -> None:
        pass
