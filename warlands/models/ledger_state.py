"""Ledger state schemas - the canonical storage of accounts and contracts."""

from __future__ import annotations
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class Owned(BaseModel):
    """Token held directly by an account."""
    kind: Literal["owned"] = "owned"
    account: str


class Staked(BaseModel):
    """Token locked in its contract's custody while scouting."""
    kind: Literal["staked"] = "staked"
    staker: str
    since: int  # Block timestamp the stake started


Holding = Annotated[Union[Owned, Staked], Field(discriminator="kind")]


class TokenRecord(BaseModel):
    """A live NFT. Burned ids have no record."""
    id: int
    holding: Holding

    @property
    def is_staked(self) -> bool:
        return isinstance(self.holding, Staked)


class NFTState(BaseModel):
    """Storage shared by every NFT contract."""
    name: str
    symbol: str
    owner: str  # Contract owner (Ownable)

    next_token_id: int = 0
    burned: int = 0

    tokens: dict[int, TokenRecord] = Field(default_factory=dict)
    balances: dict[str, int] = Field(default_factory=dict)
    token_approvals: dict[int, str] = Field(default_factory=dict)
    operator_approvals: dict[str, dict[str, bool]] = Field(default_factory=dict)

    @property
    def total_supply(self) -> int:
        return self.next_token_id - self.burned


class WarriorState(NFTState):
    """Warrior collection storage plus sale and staking config."""
    kind: Literal["warrior"] = "warrior"
    price: int
    sale_live: bool = False
    land_claim_time: int = 0
    land_address: str = ZERO_ADDRESS
    resource_address: str = ZERO_ADDRESS
    resource_per_claim: int = 0


class LandState(NFTState):
    """Land storage; the warrior address is the only allowed minter."""
    kind: Literal["land"] = "land"
    warrior_address: str
    resource_address: str
    resource_cost: int = 0


class ResourceState(BaseModel):
    """Fungible RESOURCE storage."""
    kind: Literal["resource"] = "resource"
    name: str
    symbol: str
    owner: str
    decimals: int = 18
    total_supply: int = 0
    balances: dict[str, int] = Field(default_factory=dict)
    allowances: dict[str, dict[str, int]] = Field(default_factory=dict)
    game_masters: dict[str, bool] = Field(default_factory=dict)


ContractState = Annotated[
    Union[WarriorState, LandState, ResourceState],
    Field(discriminator="kind"),
]


class LedgerState(BaseModel):
    """Everything a transaction can touch. One deep copy snapshots it all."""
    timestamp: int = Field(default=0, ge=0, description="Current block timestamp (seconds)")
    block_number: int = 0

    balances: dict[str, int] = Field(default_factory=dict, description="Native balances in wei")
    nonces: dict[str, int] = Field(default_factory=dict)
    labels: dict[str, str] = Field(default_factory=dict)

    contracts: dict[str, ContractState] = Field(default_factory=dict)

    def label(self, address: str) -> str:
        """Human label for an address, or a shortened form of it."""
        if address == ZERO_ADDRESS:
            return "0x0"
        return self.labels.get(address, f"{address[:6]}…{address[-4:]}")

    def find_label(self, label: str) -> Optional[str]:
        """Resolve a label back to its address."""
        for address, name in self.labels.items():
            if name.lower() == label.lower():
                return address
        return None

    def summary(self) -> str:
        """Generate a text summary of the ledger."""
        from warlands.units import format_ether

        lines = [
            f"=== Ledger ===",
            f"Block: {self.block_number}  Timestamp: {self.timestamp}",
        ]

        if self.contracts:
            lines.append("")
            lines.append("--- Contracts ---")
            for address, contract in self.contracts.items():
                line = f"  {self.label(address)} ({contract.kind}) {address}"
                if isinstance(contract, (WarriorState, LandState)):
                    line += f": supply {contract.total_supply}"
                else:
                    line += f": supply {contract.total_supply}, game masters {sum(contract.game_masters.values())}"
                lines.append(line)

        funded = [(a, b) for a, b in self.balances.items() if b]
        if funded:
            lines.append("")
            lines.append("--- Native Balances ---")
            for address, balance in funded[:10]:
                lines.append(f"  {self.label(address)}: {format_ether(balance)} ETH")
            if len(funded) > 10:
                lines.append(f"  ... and {len(funded) - 10} more")

        return "\n".join(lines)
