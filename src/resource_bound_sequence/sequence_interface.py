"""Abstract interface for resource-bound sequences."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from .errors import (
    AcquisitionError,
    BackingIOError,
    SequenceError,
    UnsupportedOperationError,
    UseAfterReleaseError,
)
from .models import SequenceStatus, Step
from .resources import ReleaseTracker, SharedHandle

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class SequenceState:
    """Cursor for one traversal of a sequence.

    ``position`` counts the items delivered so far, so ``0`` is the
    "before first element" position. The handle is owned by this state
    alone, except for copies of a ``ValueState``, which share it by
    reference count.
    """

    sequence_name: str
    handle: Optional[SharedHandle] = None
    position: int = 0
    status: SequenceStatus = SequenceStatus.CREATED

    @property
    def resource(self) -> Any:
        return self.handle.resource if self.handle is not None else None

    @property
    def released(self) -> bool:
        return self.status == SequenceStatus.RELEASED

    def mark(self, status: SequenceStatus) -> None:
        """Move to a pre-terminal status; a released state stays released."""
        if not self.released:
            self.status = status

    def __copy__(self):
        raise UnsupportedOperationError(
            f"{self.sequence_name} state cannot be copied; open a new traversal instead"
        )


class ResourceBoundSequence(ABC):
    """Lazy, forward-only sequence producer.

    The producer is a factory: each ``open()`` creates a fresh
    :class:`SequenceState` holding its own resource. Subclasses implement
    the ``_acquire``/``_next`` hooks and, where rewinding is possible,
    ``_rewind``.
    """

    holds_resource: bool = True
    tracker: Optional[ReleaseTracker] = None

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def _acquire(self) -> Any:
        """Obtain the external resource for a new traversal.

        Implementations must not leak a partially acquired resource.
        """
        pass

    @abstractmethod
    def _next(self, state: SequenceState) -> Step:
        """Produce the item after ``state.position``, or the end step."""
        pass

    def _rewind(self, state: SequenceState) -> None:
        """Prepare the resource for a new pass from the first element."""
        raise UnsupportedOperationError(f"{self.name} does not support reset")

    def _new_state(self, handle: Optional[SharedHandle]) -> SequenceState:
        return SequenceState(sequence_name=self.name, handle=handle)

    def open(self) -> SequenceState:
        """Acquire the resource and return a cursor before the first element.

        Raises:
            AcquisitionError: If the resource could not be obtained
        """
        try:
            resource = self._acquire()
        except SequenceError:
            raise
        except Exception as e:
            raise AcquisitionError(f"Could not acquire resource for {self.name}: {e}") from e

        handle = None
        if self.holds_resource:
            handle = SharedHandle(resource, self.name, tracker=self.tracker)

        logger.debug(f"Opened {self.name}")
        return self._new_state(handle)

    def advance(self, state: SequenceState) -> Step:
        """Produce the next item or signal end-of-sequence.

        Raises:
            UseAfterReleaseError: If the state was released
            BackingIOError: If the backing stream failed, now or on an
                earlier call
        """
        self._check_live(state, "advance")
        self._check_not_errored(state, "advance")

        if state.status == SequenceStatus.EXHAUSTED:
            return Step.end()

        try:
            step = self._next(state)
        except SequenceError:
            state.mark(SequenceStatus.ERRORED)
            raise
        except (OSError, UnicodeError) as e:
            state.mark(SequenceStatus.ERRORED)
            raise BackingIOError(f"{self.name} failed while reading: {e}") from e

        if step.has_more:
            state.position += 1
            state.mark(SequenceStatus.ITERATING)
        else:
            state.mark(SequenceStatus.EXHAUSTED)
            logger.debug(f"{self.name} exhausted after {state.position} items")
        return step

    def reset(self, state: SequenceState) -> None:
        """Rewind to the position before the first element.

        Raises:
            UseAfterReleaseError: If the state was released
            BackingIOError: If an earlier advance failed
            UnsupportedOperationError: If this producer cannot rewind
        """
        self._check_live(state, "reset")
        self._check_not_errored(state, "reset")
        self._rewind(state)
        state.position = 0
        state.status = SequenceStatus.CREATED

    def release(self, state: SequenceState) -> bool:
        """Free the resource held by ``state``. Safe to call repeatedly.

        Returns:
            True if this call released the state, False if it already was
        """
        if state.released:
            logger.debug(f"{self.name} state already released, ignoring")
            return False

        try:
            if state.handle is not None:
                state.handle.release()
        finally:
            state.status = SequenceStatus.RELEASED
        return True

    def _check_live(self, state: SequenceState, operation: str) -> None:
        if state.released:
            raise UseAfterReleaseError(operation, self.name)

    def _check_not_errored(self, state: SequenceState, operation: str) -> None:
        if state.status == SequenceStatus.ERRORED:
            raise BackingIOError(
                f"Cannot {operation}: {self.name} state errored on an earlier read; release it"
            )
