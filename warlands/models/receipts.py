"""Receipt schemas - the outcome of each submitted transaction."""

from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field
import uuid

from warlands.models.events import Event
from warlands.units import format_ether


class TxStatus(str, Enum):
    """Lifecycle of a transaction."""
    PENDING = "pending"
    SUCCESS = "success"
    REVERTED = "reverted"


class Receipt(BaseModel):
    """A submitted transaction and what came of it."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])

    # What was called
    sender: str
    to: str
    method: str
    args: list[Any] = Field(default_factory=list)
    value: int = 0  # Wei attached

    submitted_at: datetime = Field(default_factory=datetime.now)
    block_number: int = 0
    timestamp: int = 0

    # Outcome
    status: TxStatus = TxStatus.PENDING
    revert_reason: Optional[str] = None
    revert_details: dict[str, Any] = Field(default_factory=dict)
    return_value: Any = None
    events: list[Event] = Field(default_factory=list)

    model_config = {"extra": "allow"}

    @property
    def succeeded(self) -> bool:
        return self.status == TxStatus.SUCCESS

    def summary(self) -> str:
        """Generate human-readable summary."""
        status_emoji = {
            TxStatus.PENDING: "⏳",
            TxStatus.SUCCESS: "✓",
            TxStatus.REVERTED: "✗",
        }
        line = f"[{self.id}] {status_emoji[self.status]} {self.method}({', '.join(map(str, self.args))})"
        if self.value:
            line += f" value={self.value_summary()}"
        if self.revert_reason:
            line += f" reverted: {self.revert_reason}"
        return line

    def value_summary(self) -> str:
        return f"{format_ether(self.value)} ETH"
