"""Consuming loops that release the sequence state on every exit path."""

import copy
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional

from .models import LoopOutcome, SequenceStatus
from .sequence_interface import ResourceBoundSequence, SequenceState

logger = logging.getLogger(__name__)


@contextmanager
def opened(sequence: ResourceBoundSequence) -> Iterator[SequenceState]:
    """Open a traversal and release it when the block exits.

    Release runs exactly once whether the block completes, breaks out early
    or raises.

    Args:
        sequence: Producer to open

    Yields:
        The fresh SequenceState
    """
    state = sequence.open()
    try:
        yield state
    finally:
        sequence.release(state)


def for_each(sequence: ResourceBoundSequence, action: Callable[[Any], Optional[bool]]) -> LoopOutcome:
    """
    Call ``action`` for every item of ``sequence``.

    ``action`` may return ``False`` to stop early. Any exception from
    ``advance`` or from ``action`` propagates after the state is released.

    Args:
        sequence: Producer to traverse
        action: Callback receiving each item

    Returns:
        LoopOutcome describing how the loop ended
    """
    outcome = LoopOutcome(status=SequenceStatus.CREATED)

    with opened(sequence) as state:
        try:
            while True:
                step = sequence.advance(state)
                if not step.has_more:
                    break

                outcome.items_seen += 1
                if action(step.item) is False:
                    state.mark(SequenceStatus.EARLY_STOPPED)
                    break
        except BaseException:
            state.mark(SequenceStatus.ERRORED)
            logger.debug(f"{sequence.name} loop failed after {outcome.items_seen} items")
            raise
        finally:
            outcome.status = state.status

    outcome.released = state.released
    logger.debug(
        f"{sequence.name} loop ended ({outcome.status.value}) after {outcome.items_seen} items"
    )
    return outcome


def collect(sequence: ResourceBoundSequence, limit: Optional[int] = None) -> List[Any]:
    """
    Gather the items of ``sequence`` into a list.

    Args:
        sequence: Producer to traverse
        limit: Stop after this many items (None reads to the end)

    Returns:
        Items in order
    """
    if limit is not None and limit <= 0:
        raise ValueError("limit must be positive")

    items: List[Any] = []

    def keep(item: Any) -> bool:
        items.append(item)
        return limit is None or len(items) < limit

    for_each(sequence, keep)
    return items


def iterate(sequence: ResourceBoundSequence) -> Iterator[Any]:
    """
    Generator form of the consuming loop, for use in ``for`` statements.

    The state is opened on the first ``next()`` and released in a
    ``finally`` block. To release on an early ``break`` without waiting for
    the generator to be collected, wrap it in ``contextlib.closing``.

    Yields:
        Items of the sequence
    """
    state = sequence.open()
    try:
        while True:
            step = sequence.advance(state)
            if not step.has_more:
                return
            yield step.item
    except GeneratorExit:
        state.mark(SequenceStatus.EARLY_STOPPED)
        raise
    except BaseException:
        state.mark(SequenceStatus.ERRORED)
        raise
    finally:
        sequence.release(state)


@contextmanager
def copied(sequence: ResourceBoundSequence, state: SequenceState) -> Iterator[SequenceState]:
    """Copy a cursor for the duration of the block, then release the copy.

    Only states with value semantics can be copied; others raise
    UnsupportedOperationError.
    """
    twin = copy.copy(state)
    try:
        yield twin
    finally:
        sequence.release(twin)
