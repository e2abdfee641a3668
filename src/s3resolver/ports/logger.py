"""Logger port interface."""

from typing import Any, Protocol


class LoggerPort(Protocol):
    """Port for structured logging."""

    def debug(self, message: str, **kwargs: Any) -> None:
        ...

    def info(self, message: str, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, **kwargs: Any) -> None:
        ...

    def error(self, message: str, **kwargs: Any) -> None:
        ...

    def log_operation(
        self,
        op: str,
        key: str,
        durations: dict[str, float],
        **kwargs: Any,
    ) -> None:
        """Log a completed operation with its timings."""
        ...
