"""Data models for sequence traversal."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class SequenceStatus(str, Enum):
    """Lifecycle of a single traversal."""

    CREATED = "created"
    ITERATING = "iterating"
    EXHAUSTED = "exhausted"
    EARLY_STOPPED = "early_stopped"
    ERRORED = "errored"
    RELEASED = "released"


@dataclass(frozen=True)
class Step:
    """Result of one ``advance`` call.

    End of sequence is ``has_more=False`` with no item; it is never an error.
    """

    item: Any
    has_more: bool

    @classmethod
    def end(cls) -> "Step":
        """Create the end-of-sequence step."""
        return cls(item=None, has_more=False)


@dataclass
class LoopOutcome:
    """How a consuming loop finished."""

    status: SequenceStatus
    items_seen: int = 0
    released: bool = False

    @property
    def stopped_early(self) -> bool:
        """True if the consumer ended the loop before exhaustion."""
        return self.status == SequenceStatus.EARLY_STOPPED
