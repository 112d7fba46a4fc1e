"""Native currency unit helpers (ether <-> wei)."""

from __future__ import annotations
from decimal import Decimal, InvalidOperation

WEI_PER_ETHER = 10**18


def parse_ether(amount: str | int | Decimal) -> int:
    """Convert an ether amount to wei without float rounding.

    Example: parse_ether("0.24") == 240000000000000000
    """
    try:
        value = Decimal(str(amount)) * WEI_PER_ETHER
    except InvalidOperation:
        raise ValueError(f"Not an ether amount: {amount!r}")
    if value != value.to_integral_value():
        raise ValueError(f"Ether amount has more than 18 decimals: {amount!r}")
    return int(value)


def format_ether(wei: int) -> str:
    """Convert wei to a compact ether string ("0.24", "10000")."""
    text = format(Decimal(wei) / WEI_PER_ETHER, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"
