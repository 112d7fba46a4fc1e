"""RESOURCE - fungible token with game-master mint and burn."""

from __future__ import annotations
from typing import Protocol

from warlands import errors
from warlands.config import LedgerConfig
from warlands.contracts.base import Ownable, only_owner
from warlands.errors import AuthorizationFault, InvariantFault
from warlands.models.events import EventEffect, EventType
from warlands.models.ledger_state import ZERO_ADDRESS, ResourceState


class GameMasterToken(Protocol):
    """Privileged mint/burn capability, gated by game-master membership."""

    def mint(self, account: str, amount: int) -> None: ...

    def burn(self, account: str, amount: int) -> None: ...


class ResourceToken(Ownable):
    """ERC20-style balances plus an owner-managed game-master set."""

    KIND = "resource"
    LABEL = "resource"

    state: ResourceState

    @classmethod
    def constructor(cls, deployer: str, config: LedgerConfig) -> ResourceState:
        return ResourceState(name="RESOURCE", symbol="RESOURCE", owner=deployer)

    # ===== Views =====

    def name(self) -> str:
        return self.state.name

    def symbol(self) -> str:
        return self.state.symbol

    def decimals(self) -> int:
        return self.state.decimals

    def total_supply(self) -> int:
        return self.state.total_supply

    def balance_of(self, account: str) -> int:
        return self.state.balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self.state.allowances.get(owner, {}).get(spender, 0)

    def is_game_master(self, account: str) -> bool:
        return self.state.game_masters.get(account, False)

    # ===== Game masters =====

    @only_owner
    def edit_game_masters(self, accounts: list[str], flags: list[bool]) -> None:
        if len(accounts) != len(flags):
            raise InvariantFault(errors.ARRAY_LENGTH_MISMATCH, {
                "accounts": len(accounts),
                "flags": len(flags),
            })

        effects = []
        for account, flag in zip(accounts, flags):
            effects.append(EventEffect(
                target_type="game_master",
                target_id=account,
                field="enabled",
                old_value=self.is_game_master(account),
                new_value=flag,
            ))
            self.state.game_masters[account] = flag

        granted = [self._label(a) for a, f in zip(accounts, flags) if f]
        revoked = [self._label(a) for a, f in zip(accounts, flags) if not f]
        self._emit(
            EventType.GAME_MASTERS_EDITED,
            f"Game masters granted: {', '.join(granted) or '-'}; revoked: {', '.join(revoked) or '-'}",
            effects=effects,
        )

    def _check_game_master(self) -> None:
        if not self.is_game_master(self.msg.sender):
            raise AuthorizationFault(errors.NOT_GAME_MASTER, {"caller": self.msg.sender})

    def mint(self, account: str, amount: int) -> None:
        self._check_game_master()
        if account == ZERO_ADDRESS:
            raise InvariantFault(errors.MINT_TO_ZERO)

        state = self.state
        state.balances[account] = state.balances.get(account, 0) + amount
        state.total_supply += amount
        self._log_transfer(ZERO_ADDRESS, account, amount)

    def burn(self, account: str, amount: int) -> None:
        self._check_game_master()
        self._debit(account, amount)
        self.state.total_supply -= amount
        self._log_transfer(account, ZERO_ADDRESS, amount)

    # ===== Transfers =====

    def transfer(self, to: str, amount: int) -> bool:
        self._transfer(self.msg.sender, to, amount)
        return True

    def approve(self, spender: str, amount: int) -> bool:
        owner = self.msg.sender
        self.state.allowances.setdefault(owner, {})[spender] = amount
        self._emit(
            EventType.APPROVAL,
            f"{self._label(owner)} allowed {self._label(spender)} to spend {amount} RESOURCE",
            owner=owner, spender=spender, amount=amount,
        )
        return True

    def transfer_from(self, from_: str, to: str, amount: int) -> bool:
        spender = self.msg.sender
        allowed = self.allowance(from_, spender)
        if allowed < amount:
            raise AuthorizationFault(errors.INSUFFICIENT_ALLOWANCE, {"allowed": allowed, "amount": amount})
        self.state.allowances.setdefault(from_, {})[spender] = allowed - amount
        self._transfer(from_, to, amount)
        return True

    def _transfer(self, from_: str, to: str, amount: int) -> None:
        if to == ZERO_ADDRESS:
            raise InvariantFault(errors.TRANSFER_TO_ZERO)
        self._debit(from_, amount)
        self.state.balances[to] = self.state.balances.get(to, 0) + amount
        self._log_transfer(from_, to, amount)

    def _debit(self, account: str, amount: int) -> None:
        balance = self.balance_of(account)
        if balance < amount:
            raise InvariantFault(errors.INSUFFICIENT_BALANCE, {
                "account": account,
                "balance": balance,
                "amount": amount,
            })
        self.state.balances[account] = balance - amount

    def _log_transfer(self, from_: str, to: str, amount: int) -> None:
        self._emit(
            EventType.TRANSFER,
            f"{amount} RESOURCE: {self._label(from_)} → {self._label(to)}",
            effects=[
                EventEffect(target_type="balance", target_id=from_, field="resource", new_value=-amount),
                EventEffect(target_type="balance", target_id=to, field="resource", new_value=amount),
            ],
            amount=amount,
        )
