"""Protocol definitions for dependency inversion."""

from typing import Protocol


class LoggerProtocol(Protocol):
    """Protocol for logging."""

    def info(self, message: str) -> None:
        """Log info message."""
        ...

    def debug(self, message: str) -> None:
        """Log debug message."""
        ...

    def warning(self, message: str) -> None:
        """Log warning message."""
        ...

    def error(self, message: str) -> None:
        """Log error message."""
        ...


class Closeable(Protocol):
    """Anything holding an external resource that can be closed."""

    def close(self) -> None:
        """Free the resource."""
        ...
