"""UTC clock adapter."""

from datetime import UTC, datetime


class UtcClockAdapter:
    def now(self) -> datetime:
        return datetime.now(UTC)
