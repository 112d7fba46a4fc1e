"""Event log system - the committed history of everything the contracts emitted."""

from __future__ import annotations
from typing import Any, Optional

from warlands.models.events import Event, EventType, EventLog as EventLogModel


class EventLog:
    """Queryable history of committed events.

    Only the ledger writes here, and only at commit; events from reverted
    transactions never arrive.
    """

    def __init__(self) -> None:
        self._log = EventLogModel()

    def add(self, event: Event) -> None:
        self._log.add(event)

    def count(self) -> int:
        return len(self._log.events)

    # ===== Queries =====

    def get_recent(self, count: int = 10) -> list[Event]:
        return self._log.get_recent(count)

    def get_by_block(self, block_number: int) -> list[Event]:
        return self._log.get_by_block(block_number)

    def get_since_block(self, block_number: int) -> list[Event]:
        """Events from ``block_number`` onwards."""
        return [e for e in self._log.events if e.block_number >= block_number]

    def get_by_tx(self, tx_id: str) -> list[Event]:
        return [e for e in self._log.events if e.tx_id == tx_id]

    def get_by_type(self, event_type: EventType) -> list[Event]:
        return self._log.get_by_type(event_type)

    def get_by_contract(self, address: str) -> list[Event]:
        return self._log.get_by_contract(address)

    def get_by_actor(self, actor: str) -> list[Event]:
        return self._log.get_by_actor(actor)

    def search(self, text: str) -> list[Event]:
        """Case-insensitive match on event descriptions."""
        needle = text.lower()
        return [e for e in self._log.events if needle in e.description.lower()]

    # ===== Rendering =====

    def summary(self, count: int = 10) -> str:
        return self._log.summary(count)

    def detailed_summary(self, count: int = 5) -> str:
        """Full detail (effects included) for the last ``count`` events."""
        recent = self.get_recent(count)
        if not recent:
            return "No events recorded."
        return "\n\n".join(["=== Recent Events ==="] + [e.detailed() for e in recent])

    def generate_report(
        self,
        start_block: Optional[int] = None,
        end_block: Optional[int] = None,
        contract_filter: Optional[str] = None,
    ) -> str:
        """Events in a block range, optionally for one contract, grouped by transaction."""
        events = [
            e for e in self._log.events
            if (start_block is None or e.block_number >= start_block)
            and (end_block is None or e.block_number <= end_block)
            and (not contract_filter or e.contract == contract_filter)
        ]
        if not events:
            return "No events match the filter criteria."

        lines = [
            "=== Event Report ===",
            f"{len(events)} events, blocks {events[0].block_number}-{events[-1].block_number}",
        ]

        current_tx: Optional[str] = "-"
        for event in events:
            if event.tx_id != current_tx:
                current_tx = event.tx_id
                origin = f"tx {current_tx}" if current_tx else "outside transactions"
                lines.append("")
                lines.append(f"--- Block {event.block_number} (t={event.block_timestamp}), {origin} ---")
            lines.append(f"  [{event.event_type.value}] {event.actor}: {event.description}")

        return "\n".join(lines)

    # ===== Persistence =====

    def export(self) -> list[dict[str, Any]]:
        return [e.model_dump(mode="json") for e in self._log.events]

    def import_events(self, events_data: list[dict[str, Any]]) -> None:
        """Replace the history with previously exported events."""
        self._log.events = [Event(**data) for data in events_data]
