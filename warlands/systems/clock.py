"""Clock - the ledger's monotonic time oracle."""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from warlands.systems.ledger import Ledger


class Clock:
    """Block time for the ledger. Time only moves between transactions."""

    MAX_ADVANCE = 10 * 365 * 86400  # Ten years per step

    def __init__(self, ledger: "Ledger"):
        self.ledger = ledger

    def now(self) -> int:
        """Current block timestamp in seconds."""
        return self.ledger.state.timestamp

    def advance(self, seconds: int) -> dict[str, Any]:
        """Advance time by the specified number of seconds."""
        if isinstance(seconds, bool) or not isinstance(seconds, int):
            return {"success": False, "error": "Seconds must be an integer"}
        if seconds < 1:
            return {"success": False, "error": "Seconds must be at least 1"}
        if seconds > self.MAX_ADVANCE:
            return {"success": False, "error": "Cannot advance more than ten years at once"}
        if self.ledger.in_transaction:
            return {"success": False, "error": "Cannot move time during a transaction"}

        old_timestamp = self.now()
        self.ledger.state.timestamp = old_timestamp + seconds

        return {
            "success": True,
            "seconds_advanced": seconds,
            "old_timestamp": old_timestamp,
            "new_timestamp": self.now(),
            "current_date": self.current_date(),
        }

    def set_time(self, timestamp: int) -> dict[str, Any]:
        """Jump to an absolute timestamp. Time never goes backwards."""
        current = self.now()
        if timestamp < current:
            return {"success": False, "error": f"Timestamp {timestamp} is before current time {current}"}
        if timestamp == current:
            return {"success": True, "seconds_advanced": 0, "old_timestamp": current, "new_timestamp": current}
        return self.advance(timestamp - current)

    def current_date(self) -> str:
        return datetime.fromtimestamp(self.now(), tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

    def get_current_time(self) -> dict[str, Any]:
        """Get current time information."""
        return {
            "timestamp": self.now(),
            "block_number": self.ledger.state.block_number,
            "date": self.current_date(),
        }
