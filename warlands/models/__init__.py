"""Pydantic data models for ledger state, events and receipts."""

from .ledger_state import (
    ZERO_ADDRESS,
    LedgerState,
    TokenRecord,
    Owned,
    Staked,
    NFTState,
    WarriorState,
    LandState,
    ResourceState,
)
from .events import Event, EventEffect, EventType, EventLog
from .receipts import Receipt, TxStatus

__all__ = [
    "ZERO_ADDRESS",
    "LedgerState",
    "TokenRecord",
    "Owned",
    "Staked",
    "NFTState",
    "WarriorState",
    "LandState",
    "ResourceState",
    "Event",
    "EventEffect",
    "EventType",
    "EventLog",
    "Receipt",
    "TxStatus",
]
