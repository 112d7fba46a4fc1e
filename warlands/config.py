"""Ledger configuration - environment-driven defaults for the simulation."""

from __future__ import annotations
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from warlands.units import parse_ether

load_dotenv()


class LedgerConfig(BaseModel):
    """Tunable parameters for a simulated ledger and its contracts."""
    mint_price: int = Field(default=parse_ether("0.08"), ge=0, description="Warrior price in wei")
    land_claim_time: int = Field(default=86400, ge=0, description="Seconds a warrior must scout before claiming land")
    account_count: int = Field(default=20, ge=1, description="Pre-funded signer accounts")
    initial_balance: int = Field(default=parse_ether("10000"), ge=0, description="Wei per signer account")
    genesis_timestamp: Optional[int] = Field(default=None, ge=0, description="Clock start; wall clock if unset")
    resource_per_claim: int = Field(default=0, ge=0, description="RESOURCE minted to the staker per land claimed")
    land_resource_cost: int = Field(default=0, ge=0, description="RESOURCE burned from the claimer per land minted")
    save_dir: str = "saves"

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Build a config from WARLANDS_* environment variables (and .env)."""
        values: dict[str, object] = {}

        price = os.getenv("WARLANDS_MINT_PRICE")
        if price:
            values["mint_price"] = parse_ether(price)

        balance = os.getenv("WARLANDS_INITIAL_BALANCE")
        if balance:
            values["initial_balance"] = parse_ether(balance)

        int_settings = {
            "land_claim_time": "WARLANDS_LAND_CLAIM_TIME",
            "account_count": "WARLANDS_ACCOUNT_COUNT",
            "genesis_timestamp": "WARLANDS_GENESIS_TIMESTAMP",
            "resource_per_claim": "WARLANDS_RESOURCE_PER_CLAIM",
            "land_resource_cost": "WARLANDS_LAND_RESOURCE_COST",
        }
        for field_name, env_name in int_settings.items():
            raw = os.getenv(env_name)
            if raw:
                try:
                    values[field_name] = int(raw)
                except ValueError:
                    raise ValueError(f"{env_name} must be an integer, got {raw!r}")

        save_dir = os.getenv("WARLANDS_SAVE_DIR")
        if save_dir:
            values["save_dir"] = save_dir

        return cls(**values)
