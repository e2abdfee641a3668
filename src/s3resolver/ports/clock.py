"""Clock port interface."""

from datetime import datetime
from typing import Protocol


class ClockPort(Protocol):
    def now(self) -> datetime:
        """Current time, timezone aware."""
        ...
