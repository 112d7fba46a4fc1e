"""Event schemas - chronological record of everything the contracts emit."""

from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field
import uuid


class EventType(str, Enum):
    """Categories of events."""
    # Ledger events
    DEPLOYED = "deployed"
    TIME_ADVANCE = "time_advance"
    SAVE = "save"
    LOAD = "load"

    # Token events
    TRANSFER = "transfer"
    APPROVAL = "approval"
    APPROVAL_FOR_ALL = "approval_for_all"

    # Staking events
    STAKED = "staked"
    LAND_CLAIMED = "land_claimed"

    # Owner events
    OWNERSHIP_TRANSFERRED = "ownership_transferred"
    SALE_STATE_FLIPPED = "sale_state_flipped"
    CONFIG_CHANGED = "config_changed"
    GAME_MASTERS_EDITED = "game_masters_edited"
    WITHDRAWN = "withdrawn"


class EventEffect(BaseModel):
    """A state change carried by an event."""
    target_type: str  # "token", "balance", "config", etc.
    target_id: Optional[str] = None
    field: str
    old_value: Any = None
    new_value: Any = None
    description: Optional[str] = None


class Event(BaseModel):
    """A recorded event in the ledger history."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])

    # When
    recorded_at: datetime = Field(default_factory=datetime.now)
    block_number: int = 0
    block_timestamp: int = 0

    # What
    event_type: EventType
    description: str

    # Where and who
    contract: Optional[str] = None  # Emitting contract address
    actor: str  # msg.sender label, or "system"
    tx_id: Optional[str] = None

    effects: list[EventEffect] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "allow"}

    def summary(self) -> str:
        return f"[#{self.block_number}] {self.actor}: {self.description}"

    def detailed(self) -> str:
        """Multi-line rendering with the emitting contract, tx and effects."""
        header = f"{self.event_type.value} @ block {self.block_number} (t={self.block_timestamp})"
        if self.tx_id:
            header += f" tx {self.tx_id}"
        lines = [header, f"  {self.actor}: {self.description}"]
        if self.contract:
            lines.append(f"  emitted by {self.contract}")

        if self.effects:
            lines.append("  Effects:")
            for effect in self.effects:
                target = f"{effect.target_type}[{effect.target_id}]" if effect.target_id else effect.target_type
                lines.append(f"    {target}.{effect.field}: {effect.old_value} → {effect.new_value}")

        return "\n".join(lines)


class EventLog(BaseModel):
    """Serializable event history, oldest first."""
    events: list[Event] = Field(default_factory=list)

    def add(self, event: Event) -> None:
        self.events.append(event)

    def get_recent(self, count: int = 10) -> list[Event]:
        return self.events[-count:] if self.events and count > 0 else []

    def get_by_block(self, block_number: int) -> list[Event]:
        return [e for e in self.events if e.block_number == block_number]

    def get_by_type(self, event_type: EventType) -> list[Event]:
        return [e for e in self.events if e.event_type == event_type]

    def get_by_contract(self, address: str) -> list[Event]:
        return [e for e in self.events if e.contract == address]

    def get_by_actor(self, actor: str) -> list[Event]:
        return [e for e in self.events if e.actor == actor]

    def summary(self, count: int = 10) -> str:
        """One line per event for the last ``count`` events."""
        return "\n".join(e.summary() for e in self.get_recent(count)) or "No events recorded."
