"""Simulated ledger for the Warrior, RESOURCE and Land contracts."""

from .config import LedgerConfig
from .errors import Revert
from .systems.ledger import Ledger
from .units import parse_ether, format_ether

__all__ = ["Ledger", "LedgerConfig", "Revert", "parse_ether", "format_ether"]
