"""Ledger substrate: atomic transactions, the clock, and event logging."""

from .clock import Clock
from .event_log import EventLog
from .ledger import Ledger, CallContext

__all__ = ["Ledger", "CallContext", "Clock", "EventLog"]
