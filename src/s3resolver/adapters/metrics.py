"""Metrics adapters."""

from ..ports.logger import LoggerPort


class NoopMetricsAdapter:
    """Discard all metrics."""

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        pass

    def timing(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        pass


class LoggingMetricsAdapter:
    """Emit metrics as debug log lines."""

    def __init__(self, logger: LoggerPort):
        self.logger = logger

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        self.logger.debug(f"metric {name}", kind="counter", value=value, tags=tags or {})

    def timing(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self.logger.debug(f"metric {name}", kind="timing", value=round(value, 6), tags=tags or {})
