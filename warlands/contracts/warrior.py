"""Warrior collection - paid mint, scouting (staking) and land claims."""

from __future__ import annotations
from warlands import errors
from warlands.config import LedgerConfig
from warlands.contracts.base import only_owner
from warlands.contracts.erc721 import ERC721
from warlands.contracts.land import LandMinter
from warlands.contracts.resource import GameMasterToken
from warlands.errors import AuthorizationFault, PaymentFault, StateFault
from warlands.models.events import EventEffect, EventType
from warlands.models.ledger_state import ZERO_ADDRESS, Owned, Staked, WarriorState
from warlands.units import format_ether


class WarriorToken(ERC721):
    """The Warrior NFT.

    Lifecycle of an id: unminted → owned or staked; staked → owned via
    ``claim_land``; owned → staked via ``stake``; owned → burned (terminal).
    """

    KIND = "warrior"
    LABEL = "warrior"

    state: WarriorState

    @classmethod
    def constructor(cls, deployer: str, config: LedgerConfig) -> WarriorState:
        return WarriorState(
            name="Warrior",
            symbol="WARRIOR",
            owner=deployer,
            price=config.mint_price,
            land_claim_time=config.land_claim_time,
            resource_per_claim=config.resource_per_claim,
        )

    # ===== Views =====

    def price(self) -> int:
        return self.state.price

    def sale_live(self) -> bool:
        return self.state.sale_live

    def land_claim_time(self) -> int:
        return self.state.land_claim_time

    def land_address(self) -> str:
        return self.state.land_address

    def resource_address(self) -> str:
        return self.state.resource_address

    def resource_per_claim(self) -> int:
        return self.state.resource_per_claim

    def activities(self, token_id: int) -> tuple[str, int]:
        """(staker, start time) for a scouting warrior, zeroes otherwise."""
        record = self.state.tokens.get(token_id)
        if record is None or not isinstance(record.holding, Staked):
            return ZERO_ADDRESS, 0
        return record.holding.staker, record.holding.since

    # ===== Minting & scouting =====

    def public_mint(self, quantity: int, stake: bool) -> list[int]:
        state = self.state
        sender = self.msg.sender

        if not state.sale_live:
            raise StateFault(errors.SALE_NOT_LIVE)

        required = state.price * quantity
        if self.msg.value != required:
            raise PaymentFault(errors.INCORRECT_PAYMENT, {
                "sent": self.msg.value,
                "required": required,
            })

        minted = self._mint(sender, quantity)
        if stake:
            for token_id in minted:
                self._begin_scouting(token_id, sender)
        return minted

    def stake(self, token_ids: list[int]) -> None:
        if not token_ids:
            raise StateFault(errors.NO_WARRIORS)

        sender = self.msg.sender
        for token_id in token_ids:
            record = self._record(token_id)
            if record.is_staked:
                raise StateFault(errors.ALREADY_SCOUTING, {"token_id": token_id})
            if record.holding.account != sender:
                raise AuthorizationFault(errors.NOT_STAKER, {"token_id": token_id, "caller": sender})
            self._begin_scouting(token_id, sender)

    def _begin_scouting(self, token_id: int, staker: str) -> None:
        now = self.block_timestamp
        self._move(self.state.tokens[token_id], Staked(staker=staker, since=now))
        self._emit(
            EventType.STAKED,
            f"{self._label(staker)} sent WARRIOR #{token_id} scouting",
            effects=[EventEffect(
                target_type="activity",
                target_id=str(token_id),
                field="staker",
                old_value=ZERO_ADDRESS,
                new_value=staker,
            )],
            token_id=token_id,
            staker=staker,
            since=now,
        )

    def claim_land(self, token_ids: list[int]) -> list[int]:
        """Claim one Land per finished scout. Any bad id aborts the whole call."""
        if not token_ids:
            raise StateFault(errors.NO_WARRIORS)

        state = self.state
        if state.land_address == ZERO_ADDRESS:
            raise StateFault(errors.CONTRACTS_NOT_SET)
        if state.resource_per_claim and state.resource_address == ZERO_ADDRESS:
            raise StateFault(errors.CONTRACTS_NOT_SET)

        sender = self.msg.sender
        now = self.block_timestamp
        land: LandMinter = self._remote(state.land_address)
        resource: GameMasterToken = self._remote(state.resource_address)

        claimed = []
        for token_id in token_ids:
            record = self._record(token_id)
            holding = record.holding
            if not isinstance(holding, Staked):
                raise StateFault(errors.NOT_SCOUTING, {"token_id": token_id})
            if holding.staker != sender:
                raise AuthorizationFault(errors.NOT_STAKER, {"token_id": token_id, "caller": sender})

            elapsed = now - holding.since
            if elapsed < state.land_claim_time:
                raise StateFault(errors.CLAIM_TOO_EARLY, {
                    "token_id": token_id,
                    "elapsed": elapsed,
                    "required": state.land_claim_time,
                })

            self._move(record, Owned(account=holding.staker))
            land_id = land.mint_for(holding.staker)
            if state.resource_per_claim:
                resource.mint(holding.staker, state.resource_per_claim)

            self._emit(
                EventType.LAND_CLAIMED,
                f"{self._label(holding.staker)} claimed LAND #{land_id} with WARRIOR #{token_id}",
                effects=[EventEffect(
                    target_type="activity",
                    target_id=str(token_id),
                    field="staker",
                    old_value=holding.staker,
                    new_value=ZERO_ADDRESS,
                )],
                token_id=token_id,
                land_id=land_id,
                scouted_for=elapsed,
            )
            claimed.append(land_id)

        return claimed

    def burn(self, token_id: int) -> None:
        self._burn(token_id)

    # ===== Owner =====

    @only_owner
    def flip_sale_state(self) -> None:
        state = self.state
        state.sale_live = not state.sale_live
        self._emit(
            EventType.SALE_STATE_FLIPPED,
            f"Sale is now {'live' if state.sale_live else 'closed'}",
            effects=[EventEffect(
                target_type="config",
                field="sale_live",
                old_value=not state.sale_live,
                new_value=state.sale_live,
            )],
        )

    @only_owner
    def set_contract_addresses(self, land: str, resource: str) -> None:
        state = self.state
        effects = [
            EventEffect(target_type="config", field="land_address", old_value=state.land_address, new_value=land),
            EventEffect(target_type="config", field="resource_address", old_value=state.resource_address, new_value=resource),
        ]
        state.land_address = land
        state.resource_address = resource
        self._emit(
            EventType.CONFIG_CHANGED,
            f"Linked land {self._label(land)} and resource {self._label(resource)}",
            effects=effects,
        )

    @only_owner
    def set_land_claim_time(self, duration: int) -> None:
        self._set_config("land_claim_time", duration)

    @only_owner
    def set_resource_per_claim(self, amount: int) -> None:
        self._set_config("resource_per_claim", amount)

    def _set_config(self, field: str, value: int) -> None:
        old_value = getattr(self.state, field)
        setattr(self.state, field, value)
        self._emit(
            EventType.CONFIG_CHANGED,
            f"{field} set to {value}",
            effects=[EventEffect(target_type="config", field=field, old_value=old_value, new_value=value)],
        )

    @only_owner
    def withdraw(self) -> int:
        amount = self.ledger.native_balance(self.address)
        owner = self.state.owner
        self.ledger.transfer_value(self.address, owner, amount)
        self._emit(
            EventType.WITHDRAWN,
            f"{format_ether(amount)} ETH withdrawn to {self._label(owner)}",
            effects=[EventEffect(target_type="balance", target_id=owner, field="native", old_value=0, new_value=amount)],
            amount=amount,
        )
        return amount
