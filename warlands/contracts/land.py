"""Land - parcels minted only through the Warrior contract's claim path."""

from __future__ import annotations
from typing import Protocol

from warlands import errors
from warlands.config import LedgerConfig
from warlands.contracts.erc721 import ERC721
from warlands.contracts.resource import GameMasterToken
from warlands.errors import AuthorizationFault
from warlands.models.ledger_state import LandState


class LandMinter(Protocol):
    """What a land claim needs from the Land contract."""

    def mint_for(self, account: str) -> int: ...


class LandToken(ERC721):
    """The Land NFT. The allowed minter is fixed at construction."""

    KIND = "land"
    LABEL = "land"

    state: LandState

    @classmethod
    def constructor(cls, deployer: str, config: LedgerConfig, warrior: str, resource: str) -> LandState:
        return LandState(
            name="Land",
            symbol="LAND",
            owner=deployer,
            warrior_address=warrior,
            resource_address=resource,
            resource_cost=config.land_resource_cost,
        )

    def warrior(self) -> str:
        return self.state.warrior_address

    def resource(self) -> str:
        return self.state.resource_address

    def resource_cost(self) -> int:
        return self.state.resource_cost

    def mint_for(self, account: str) -> int:
        """Mint one parcel to ``account``. Checked against the minter on every call."""
        state = self.state
        if self.msg.sender != state.warrior_address:
            raise AuthorizationFault(errors.NOT_ALLOWED_MINTER, {"caller": self.msg.sender})

        if state.resource_cost:
            resource: GameMasterToken = self._remote(state.resource_address)
            resource.burn(account, state.resource_cost)

        (token_id,) = self._mint(account, 1)
        return token_id
