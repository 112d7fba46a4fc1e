"""Shared NFT surface - ownership, approvals, transfers, mint and burn."""

from __future__ import annotations
from typing import Union

from warlands import errors
from warlands.contracts.base import Ownable
from warlands.errors import AuthorizationFault, InvariantFault, StateFault
from warlands.models.events import EventEffect, EventType
from warlands.models.ledger_state import (
    ZERO_ADDRESS,
    NFTState,
    Owned,
    Staked,
    TokenRecord,
)


class ERC721(Ownable):
    """Sequential-id NFT with owner, operator and single-token approvals.

    A token's holder is its ``Owned`` account, or this contract's own address
    while it is ``Staked``; staked tokens count toward the contract's balance.
    """

    state: NFTState

    # ===== Views =====

    def name(self) -> str:
        return self.state.name

    def symbol(self) -> str:
        return self.state.symbol

    def total_supply(self) -> int:
        return self.state.total_supply

    def balance_of(self, owner: str) -> int:
        if owner == ZERO_ADDRESS:
            raise StateFault(errors.BALANCE_QUERY_ZERO)
        return self.state.balances.get(owner, 0)

    def owner_of(self, token_id: int) -> str:
        return self._holder(self._record(token_id))

    def exists(self, token_id: int) -> bool:
        return token_id in self.state.tokens

    def get_approved(self, token_id: int) -> str:
        if token_id not in self.state.tokens:
            raise StateFault(errors.APPROVAL_QUERY_NONEXISTENT, {"token_id": token_id})
        return self.state.token_approvals.get(token_id, ZERO_ADDRESS)

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return self.state.operator_approvals.get(owner, {}).get(operator, False)

    def tokens_of(self, owner: str) -> list[int]:
        """All ids currently held by ``owner`` (not part of the ABI)."""
        return [tid for tid, record in self.state.tokens.items() if self._holder(record) == owner]

    # ===== Approvals =====

    def approve(self, to: str, token_id: int) -> None:
        holder = self.owner_of(token_id)
        sender = self.msg.sender

        if to == holder:
            raise InvariantFault(errors.APPROVAL_TO_CURRENT_OWNER, {"token_id": token_id})
        if sender != holder and not self.is_approved_for_all(holder, sender):
            raise AuthorizationFault(errors.APPROVAL_NOT_OWNER, {"caller": sender, "token_id": token_id})

        self.state.token_approvals[token_id] = to
        self._emit(
            EventType.APPROVAL,
            f"{self._label(holder)} approved {self._label(to)} for {self.state.symbol} #{token_id}",
            owner=holder, approved=to, token_id=token_id,
        )

    def set_approval_for_all(self, operator: str, approved: bool) -> None:
        sender = self.msg.sender
        if operator == sender:
            raise InvariantFault(errors.APPROVE_TO_CALLER)

        self.state.operator_approvals.setdefault(sender, {})[operator] = approved
        verb = "granted" if approved else "revoked"
        self._emit(
            EventType.APPROVAL_FOR_ALL,
            f"{self._label(sender)} {verb} operator rights to {self._label(operator)}",
            owner=sender, operator=operator, approved=approved,
        )

    # ===== Transfers =====

    def transfer_from(self, from_: str, to: str, token_id: int) -> None:
        record = self._record(token_id)
        holder = self._holder(record)

        if holder != from_:
            raise StateFault(errors.TRANSFER_FROM_INCORRECT_OWNER, {"token_id": token_id, "from": from_})
        if not self._is_approved_or_owner(self.msg.sender, record):
            raise AuthorizationFault(errors.TRANSFER_NOT_APPROVED, {"caller": self.msg.sender, "token_id": token_id})
        if to == ZERO_ADDRESS:
            raise InvariantFault(errors.TRANSFER_TO_ZERO)

        self._move(record, Owned(account=to))

    # ===== Internals =====

    def _record(self, token_id: int) -> TokenRecord:
        record = self.state.tokens.get(token_id)
        if record is None:
            raise StateFault(errors.NONEXISTENT_TOKEN, {"token_id": token_id})
        return record

    def _holder(self, record: TokenRecord) -> str:
        if isinstance(record.holding, Staked):
            return self.address
        return record.holding.account

    def _is_approved_or_owner(self, spender: str, record: TokenRecord) -> bool:
        # Custodial tokens only leave through the contract's own code paths
        if record.is_staked:
            return False
        holder = self._holder(record)
        return (
            spender == holder
            or self.is_approved_for_all(holder, spender)
            or self.state.token_approvals.get(record.id) == spender
        )

    def _move(self, record: TokenRecord, holding: Union[Owned, Staked]) -> None:
        """Re-home a token, keeping balances and approvals consistent."""
        state = self.state
        old_holder = self._holder(record)
        record.holding = holding
        new_holder = self._holder(record)

        state.token_approvals.pop(record.id, None)
        if old_holder != new_holder:
            state.balances[old_holder] = state.balances.get(old_holder, 0) - 1
            state.balances[new_holder] = state.balances.get(new_holder, 0) + 1

        self._emit(
            EventType.TRANSFER,
            f"{state.symbol} #{record.id}: {self._label(old_holder)} → {self._label(new_holder)}",
            effects=[EventEffect(
                target_type="token",
                target_id=str(record.id),
                field="holder",
                old_value=old_holder,
                new_value=new_holder,
            )],
            token_id=record.id,
        )

    def _mint(self, to: str, quantity: int) -> list[int]:
        """Mint ``quantity`` sequential ids to ``to``."""
        if to == ZERO_ADDRESS:
            raise InvariantFault(errors.MINT_TO_ZERO)
        if quantity == 0:
            raise InvariantFault(errors.MINT_ZERO_QUANTITY)

        state = self.state
        minted = []
        for _ in range(quantity):
            token_id = state.next_token_id
            state.next_token_id += 1
            state.tokens[token_id] = TokenRecord(id=token_id, holding=Owned(account=to))
            state.balances[to] = state.balances.get(to, 0) + 1
            minted.append(token_id)

            self._emit(
                EventType.TRANSFER,
                f"{state.symbol} #{token_id} minted to {self._label(to)}",
                effects=[EventEffect(
                    target_type="token",
                    target_id=str(token_id),
                    field="holder",
                    old_value=ZERO_ADDRESS,
                    new_value=to,
                )],
                token_id=token_id,
            )

        return minted

    def _burn(self, token_id: int) -> None:
        """Destroy a token for good, with the transfer authorization check."""
        record = self._record(token_id)
        if not self._is_approved_or_owner(self.msg.sender, record):
            raise AuthorizationFault(errors.TRANSFER_NOT_APPROVED, {"caller": self.msg.sender, "token_id": token_id})

        state = self.state
        holder = self._holder(record)
        del state.tokens[token_id]
        state.token_approvals.pop(token_id, None)
        state.balances[holder] = state.balances.get(holder, 0) - 1
        state.burned += 1

        self._emit(
            EventType.TRANSFER,
            f"{state.symbol} #{token_id} burned by {self._label(self.msg.sender)}",
            effects=[EventEffect(
                target_type="token",
                target_id=str(token_id),
                field="holder",
                old_value=holder,
                new_value=ZERO_ADDRESS,
            )],
            token_id=token_id,
        )
