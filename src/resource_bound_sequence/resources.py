"""Resources held by sequence states, and release bookkeeping."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional

from .protocols import Closeable

logger = logging.getLogger(__name__)


@dataclass
class ReleaseTracker:
    """Counts acquisitions and releases of sequence resources.

    A tracker can be shared by several producers to count releases across
    them. ``on_release`` is called with the producer name on every free.
    """

    acquired: int = 0
    released: int = 0
    events: List[str] = field(default_factory=list)
    on_release: Optional[Callable[[str], None]] = None

    def record_acquire(self, name: str) -> None:
        self.acquired += 1
        self.events.append(f"acquire:{name}")

    def record_release(self, name: str) -> None:
        self.released += 1
        self.events.append(f"release:{name}")
        if self.on_release is not None:
            self.on_release(name)

    @property
    def outstanding(self) -> int:
        """Number of resources acquired but not yet freed."""
        return self.acquired - self.released


class MemoryBuffer:
    """In-memory buffer owned by a single traversal."""

    def __init__(self, values: Iterable[Any]):
        self._values: Optional[List[Any]] = list(values)

    def __len__(self) -> int:
        return len(self._values) if self._values is not None else 0

    def __getitem__(self, index: int) -> Any:
        if self._values is None:
            raise ValueError("I/O operation on freed buffer")
        return self._values[index]

    @property
    def closed(self) -> bool:
        return self._values is None

    def close(self) -> None:
        """Drop the buffered values."""
        self._values = None


class SharedHandle:
    """
    Reference-counted owner of one external resource.

    Every state holding the handle owns one reference. The resource is
    closed, and the release recorded, only when the last reference goes.
    """

    def __init__(
        self,
        resource: Closeable,
        name: str,
        tracker: Optional[ReleaseTracker] = None,
    ):
        """
        Initialize handle with a single reference.

        Args:
            resource: Object to close when the last reference is released
            name: Name of the producer that acquired the resource
            tracker: Optional release tracker
        """
        self.resource = resource
        self.name = name
        self._tracker = tracker
        self._refs = 1

        if self._tracker is not None:
            self._tracker.record_acquire(name)
        logger.debug(f"Acquired resource for {name}")

    @property
    def refs(self) -> int:
        return self._refs

    @property
    def freed(self) -> bool:
        return self._refs == 0

    def retain(self) -> "SharedHandle":
        """Add a reference for a copied state."""
        if self.freed:
            raise ValueError(f"Cannot retain freed resource of {self.name}")
        self._refs += 1
        logger.debug(f"Retained resource for {self.name} (refs={self._refs})")
        return self

    def release(self) -> bool:
        """
        Drop one reference.

        Returns:
            True if this call freed the resource
        """
        if self.freed:
            return False

        self._refs -= 1
        if self._refs > 0:
            logger.debug(f"Dropped reference for {self.name} (refs={self._refs})")
            return False

        try:
            self.resource.close()
        finally:
            logger.debug(f"Released resource for {self.name}")
            if self._tracker is not None:
                self._tracker.record_release(self.name)
        return True
