"""Call handlers - dict-returning operations over a deployed contract set."""

from __future__ import annotations
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from warlands.contracts import LandToken, ResourceToken, WarriorToken
    from warlands.systems.ledger import Ledger

from warlands.errors import Revert
from warlands.models.receipts import Receipt
from warlands.units import format_ether


class LedgerHandlers:
    """Operations the console runs, reported as result dicts.

    Each method returns ``{"success": True, ...}`` or
    ``{"success": False, "error": <revert reason>}``; a failed call has
    already been rolled back by the ledger.
    """

    def __init__(
        self,
        ledger: "Ledger",
        warrior: "WarriorToken",
        land: "LandToken",
        resource: "ResourceToken",
    ):
        self.ledger = ledger
        self.warrior = warrior
        self.land = land
        self.resource = resource

    def _send(self, sender: str, address: str, method: str, *args: Any, value: int = 0) -> dict[str, Any]:
        try:
            receipt: Receipt = self.ledger.transact(sender, address, method, *args, value=value)
        except Revert as exc:
            return {"success": False, "error": exc.reason, "details": exc.details}

        return {
            "success": True,
            "tx_id": receipt.id,
            "block_number": receipt.block_number,
            "result": receipt.return_value,
            "events": [e.summary() for e in receipt.events],
            "message": f"{receipt.method} confirmed in block {receipt.block_number}",
        }

    # ===== Warrior =====

    def public_mint(self, sender: str, quantity: int, stake: bool = False) -> dict[str, Any]:
        """Mint paying exactly the current price."""
        value = self.warrior.price() * quantity
        return self._send(sender, self.warrior.address, "publicMint", quantity, stake, value=value)

    def stake(self, sender: str, token_ids: list[int]) -> dict[str, Any]:
        return self._send(sender, self.warrior.address, "stake", token_ids)

    def claim_land(self, sender: str, token_ids: list[int]) -> dict[str, Any]:
        return self._send(sender, self.warrior.address, "claimLand", token_ids)

    def transfer(self, sender: str, to: str, token_id: int, from_: str | None = None) -> dict[str, Any]:
        return self._send(sender, self.warrior.address, "transferFrom", from_ or sender, to, token_id)

    def set_approval_for_all(self, sender: str, operator: str, approved: bool) -> dict[str, Any]:
        return self._send(sender, self.warrior.address, "setApprovalForAll", operator, approved)

    def burn(self, sender: str, token_id: int) -> dict[str, Any]:
        return self._send(sender, self.warrior.address, "burn", token_id)

    def flip_sale_state(self, sender: str) -> dict[str, Any]:
        return self._send(sender, self.warrior.address, "flipSaleState")

    def set_land_claim_time(self, sender: str, duration: int) -> dict[str, Any]:
        return self._send(sender, self.warrior.address, "setLandClaimTime", duration)

    def withdraw(self, sender: str) -> dict[str, Any]:
        result = self._send(sender, self.warrior.address, "withdraw")
        if result["success"]:
            result["message"] = f"Withdrew {format_ether(result['result'])} ETH"
        return result

    # ===== RESOURCE =====

    def transfer_resource(self, sender: str, to: str, amount: int) -> dict[str, Any]:
        return self._send(sender, self.resource.address, "transfer", to, amount)

    # ===== Time & queries =====

    def advance_time(self, seconds: int) -> dict[str, Any]:
        return self.ledger.advance_time(seconds)

    def get_account(self, account: str) -> dict[str, Any]:
        """Holdings of one account across all three contracts."""
        scouting = []
        for token_id in self.warrior.tokens_of(self.warrior.address):
            staker, since = self.warrior.activities(token_id)
            if staker == account:
                scouting.append({
                    "token_id": token_id,
                    "since": since,
                    "elapsed": self.ledger.clock.now() - since,
                })

        return {
            "address": account,
            "label": self.ledger.state.label(account),
            "eth": format_ether(self.ledger.native_balance(account)),
            "warriors": self.warrior.tokens_of(account),
            "scouting": scouting,
            "lands": self.land.tokens_of(account),
            "resource": self.resource.balance_of(account),
        }

    def get_status(self) -> dict[str, Any]:
        """Contract-level status."""
        warrior = self.warrior.state
        return {
            "block_number": self.ledger.state.block_number,
            "timestamp": self.ledger.clock.now(),
            "date": self.ledger.clock.current_date(),
            "sale_live": warrior.sale_live,
            "price": format_ether(warrior.price),
            "land_claim_time": warrior.land_claim_time,
            "warrior_supply": self.warrior.total_supply(),
            "scouting": self.warrior.balance_of(self.warrior.address),
            "land_supply": self.land.total_supply(),
            "resource_supply": self.resource.total_supply(),
            "treasury": format_ether(self.ledger.native_balance(self.warrior.address)),
        }
