"""Ledger - simulated substrate with accounts, native balances and atomic transactions."""

from __future__ import annotations
import hashlib
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Type, TYPE_CHECKING

from warlands import errors
from warlands.abi.registry import AbiRegistry, Method
from warlands.abi.validation import CallValidator
from warlands.config import LedgerConfig
from warlands.errors import AuthorizationFault, Revert, InvariantFault, PaymentFault, StateFault
from warlands.models.events import Event, EventEffect, EventType
from warlands.models.ledger_state import LedgerState, ZERO_ADDRESS
from warlands.models.receipts import Receipt, TxStatus
from warlands.systems.clock import Clock
from warlands.systems.event_log import EventLog

if TYPE_CHECKING:
    from warlands.contracts.base import Contract


@dataclass(frozen=True)
class CallContext:
    """msg.sender / msg.value for the call currently executing."""
    sender: str
    value: int
    to: str


def derive_address(seed: str) -> str:
    """Deterministic 20-byte address from a seed string."""
    return "0x" + hashlib.sha256(seed.encode()).hexdigest()[:40]


class Ledger:
    """Serialized, all-or-nothing execution of contract calls.

    Every transaction runs against a deep snapshot of ``LedgerState``; a
    ``Revert`` anywhere in the call tree restores the snapshot, discards
    buffered events and re-raises. Nested contract-to-contract calls share
    the outer transaction.
    """

    def __init__(self, config: Optional[LedgerConfig] = None, *, fund_accounts: bool = True):
        self.config = config or LedgerConfig()

        genesis = self.config.genesis_timestamp
        if genesis is None:
            genesis = int(time.time())

        self.state = LedgerState(timestamp=genesis)
        self.clock = Clock(self)
        self.event_log = EventLog()
        self.registry = AbiRegistry()
        self.validator = CallValidator()
        self.receipts: list[Receipt] = []
        self.accounts: list[str] = []

        self._contracts: dict[str, "Contract"] = {}
        self._context_stack: list[CallContext] = []
        self._pending_events: Optional[list[Event]] = None
        self._current_tx: Optional[Receipt] = None

        if fund_accounts:
            for index in range(self.config.account_count):
                label = "owner" if index == 0 else f"addr{index}"
                self.accounts.append(self.create_account(label))

    # ===== Accounts =====

    def create_account(self, label: str, balance: Optional[int] = None) -> str:
        """Create and fund an externally owned account."""
        if self.state.find_label(label):
            raise ValueError(f"Label already in use: {label}")
        address = derive_address(f"account:{label}")
        self.state.balances[address] = self.config.initial_balance if balance is None else balance
        self.state.labels[address] = label
        return address

    def resolve(self, name_or_address: str) -> Optional[str]:
        """Resolve a label ("addr1", "warrior") or an address to an address."""
        lowered = name_or_address.lower()
        if lowered in self.state.labels or lowered in self.state.contracts:
            return lowered
        if self.validator.ADDRESS_PATTERN.match(name_or_address):
            return lowered
        return self.state.find_label(name_or_address)

    def native_balance(self, address: str) -> int:
        return self.state.balances.get(address.lower(), 0)

    def transfer_value(self, sender: str, to: str, amount: int) -> None:
        """Move native currency inside the running transaction."""
        if not self.in_transaction:
            raise RuntimeError("Value can only move inside a transaction")
        if amount < 0:
            raise InvariantFault(errors.INVALID_ARGUMENT, {"value": amount})
        available = self.state.balances.get(sender, 0)
        if available < amount:
            raise PaymentFault(errors.INSUFFICIENT_FUNDS, {
                "account": sender, "balance": available, "required": amount,
            })
        self.state.balances[sender] = available - amount
        self.state.balances[to] = self.state.balances.get(to, 0) + amount

    # ===== Contracts =====

    def deploy(self, contract_cls: Type["Contract"], deployer: str, *args: Any) -> "Contract":
        """Deploy a contract as its own transaction and return a handle to it."""
        deployer = deployer.lower()
        self._check_sender(deployer)
        method = self.registry.get(contract_cls.KIND, "constructor")
        if method is None:
            raise ValueError(f"No constructor registered for {contract_cls.KIND}")

        nonce = self.state.nonces.get(deployer, 0)
        address = derive_address(f"contract:{deployer}:{nonce}")

        receipt = Receipt(sender=deployer, to=address, method="constructor", args=list(args))
        created: list["Contract"] = []

        def run() -> str:
            normalized = self.validator.normalize(method, args)
            self._context_stack.append(CallContext(sender=deployer, value=0, to=address))
            try:
                contract_state = contract_cls.constructor(deployer, self.config, *normalized)
                self.state.contracts[address] = contract_state
                self.state.balances.setdefault(address, 0)
                self.state.labels[address] = self._unique_label(contract_cls.LABEL or contract_cls.KIND)
                self.emit(
                    EventType.DEPLOYED,
                    f"{contract_cls.__name__} deployed at {address}",
                    contract=address,
                )
            finally:
                self._context_stack.pop()
            created.append(contract_cls(self, address))
            return address

        self._run_transaction(receipt, run)
        self._contracts[address] = created[0]
        return created[0]

    def _unique_label(self, base: str) -> str:
        label, suffix = base, 2
        while self.state.find_label(label):
            label = f"{base}{suffix}"
            suffix += 1
        return label

    def contract_at(self, address: str) -> "Contract":
        contract = self._contracts.get(address.lower())
        if contract is None:
            raise StateFault(errors.UNKNOWN_CONTRACT, {"address": address})
        return contract

    def contracts(self) -> list["Contract"]:
        return list(self._contracts.values())

    # ===== Calls =====

    @property
    def in_transaction(self) -> bool:
        return self._pending_events is not None

    @property
    def context(self) -> CallContext:
        """The innermost executing call (a zero-sender context outside calls)."""
        if self._context_stack:
            return self._context_stack[-1]
        return CallContext(sender=ZERO_ADDRESS, value=0, to=ZERO_ADDRESS)

    def transact(self, sender: str, to: str, method_name: str, *args: Any, value: int = 0) -> Any:
        """Submit one external call as an atomic transaction.

        Returns the receipt; view methods are routed to ``view`` and return
        their value instead. Raises ``Revert`` after rolling back on failure.
        """
        sender, to = sender.lower(), to.lower()
        self._check_sender(sender)
        contract = self.contract_at(to)
        method = self.registry.get(contract.KIND, method_name)

        if method is not None and method.view:
            if value:
                raise PaymentFault(errors.NON_PAYABLE, {"method": method.name, "value": value})
            return self.view(to, method_name, *args)

        receipt = Receipt(
            sender=sender,
            to=to,
            method=method.name if method else method_name,
            args=list(args),
            value=value,
        )

        def run() -> Any:
            if method is None or method.is_constructor:
                raise InvariantFault(errors.UNKNOWN_METHOD, {"method": method_name, "kind": contract.KIND})
            normalized = self.validator.normalize(method, args)
            if value:
                if not method.payable:
                    raise PaymentFault(errors.NON_PAYABLE, {"method": method.name, "value": value})
                self.transfer_value(sender, to, value)
            return self._invoke(contract, method, sender, value, normalized)

        return self._run_transaction(receipt, run)

    def _check_sender(self, sender: str) -> None:
        """External transactions only come from externally owned accounts.

        Contracts act as msg.sender solely through nested ``call``s made by
        their own code.
        """
        if not self.validator.ADDRESS_PATTERN.match(sender):
            raise InvariantFault(errors.INVALID_ARGUMENT, {"sender": sender})
        if sender in self.state.contracts:
            raise AuthorizationFault(errors.NOT_EXTERNAL_SENDER, {"sender": sender})

    def call(self, sender: str, to: str, method_name: str, *args: Any) -> Any:
        """Nested contract-to-contract call inside the running transaction."""
        if not self.in_transaction:
            raise RuntimeError("Nested calls only run inside a transaction")
        contract = self.contract_at(to)
        method = self.registry.get(contract.KIND, method_name)
        if method is None or method.is_constructor:
            raise InvariantFault(errors.UNKNOWN_METHOD, {"method": method_name, "kind": contract.KIND})
        normalized = self.validator.normalize(method, args)
        return self._invoke(contract, method, sender.lower(), 0, normalized)

    def view(self, to: str, method_name: str, *args: Any) -> Any:
        """Read-only call. No snapshot, no block."""
        contract = self.contract_at(to)
        method = self.registry.get(contract.KIND, method_name)
        if method is None:
            raise InvariantFault(errors.UNKNOWN_METHOD, {"method": method_name, "kind": contract.KIND})
        if not method.view:
            raise InvariantFault(errors.NOT_A_VIEW, {"method": method.name})
        normalized = self.validator.normalize(method, args)
        return self._invoke(contract, method, ZERO_ADDRESS, 0, normalized)

    def _invoke(self, contract: "Contract", method: Method, sender: str, value: int, args: list[Any]) -> Any:
        self._context_stack.append(CallContext(sender=sender, value=value, to=contract.address))
        try:
            return getattr(contract, method.handler)(*args)
        finally:
            self._context_stack.pop()

    def _run_transaction(self, receipt: Receipt, body: Callable[[], Any]) -> Receipt:
        if self.in_transaction:
            raise RuntimeError("Transactions cannot nest; use Ledger.call for contract-to-contract calls")

        snapshot = self.state.model_copy(deep=True)
        receipt.block_number = self.state.block_number + 1
        receipt.timestamp = self.clock.now()
        self._pending_events = []
        self._current_tx = receipt

        try:
            result = body()
        except Revert as exc:
            self.state = snapshot
            receipt.status = TxStatus.REVERTED
            receipt.revert_reason = exc.reason
            receipt.revert_details = exc.details
            self.receipts.append(receipt)
            raise
        except Exception:
            self.state = snapshot
            raise
        finally:
            events = self._pending_events
            self._pending_events = None
            self._current_tx = None
            self._context_stack.clear()

        self.state.block_number = receipt.block_number
        self.state.nonces[receipt.sender] = self.state.nonces.get(receipt.sender, 0) + 1

        receipt.status = TxStatus.SUCCESS
        receipt.return_value = result
        receipt.events = events
        for event in events:
            self.event_log.add(event)
        self.receipts.append(receipt)
        return receipt

    # ===== Events & time =====

    def emit(
        self,
        event_type: EventType,
        description: str,
        contract: Optional[str] = None,
        effects: Optional[list[EventEffect]] = None,
        **metadata: Any,
    ) -> Event:
        """Record an event; buffered until the running transaction commits."""
        in_tx = self.in_transaction
        event = Event(
            event_type=event_type,
            description=description,
            contract=contract,
            actor=self.state.label(self.context.sender) if self._context_stack else "system",
            block_number=self.state.block_number + (1 if in_tx else 0),
            block_timestamp=self.clock.now(),
            tx_id=self._current_tx.id if self._current_tx else None,
            effects=effects or [],
            metadata=metadata,
        )
        if in_tx:
            self._pending_events.append(event)
        else:
            self.event_log.add(event)
        return event

    def advance_time(self, seconds: int) -> dict[str, Any]:
        """Advance the clock and log it."""
        result = self.clock.advance(seconds)
        if result.get("success"):
            self.emit(
                EventType.TIME_ADVANCE,
                f"Time advanced by {seconds}s",
                effects=[EventEffect(
                    target_type="clock",
                    field="timestamp",
                    old_value=result["old_timestamp"],
                    new_value=result["new_timestamp"],
                )],
            )
        return result

    # ===== Persistence =====

    def export(self) -> dict[str, Any]:
        """Export the whole ledger for serialization."""
        return {
            "version": 1,
            "config": self.config.model_dump(mode="json"),
            "accounts": list(self.accounts),
            "state": self.state.model_dump(mode="json"),
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
            "events": self.event_log.export(),
        }

    @classmethod
    def from_export(cls, data: dict[str, Any], config: Optional[LedgerConfig] = None) -> "Ledger":
        """Rebuild a ledger from ``export`` output."""
        from warlands.contracts import CONTRACT_TYPES

        ledger = cls(config or LedgerConfig(**data.get("config", {})), fund_accounts=False)
        ledger.state = LedgerState(**data["state"])
        ledger.accounts = list(data.get("accounts", []))
        ledger.receipts = [Receipt(**r) for r in data.get("receipts", [])]
        ledger.event_log.import_events(data.get("events", []))

        for address, contract_state in ledger.state.contracts.items():
            contract_cls = CONTRACT_TYPES[contract_state.kind]
            ledger._contracts[address] = contract_cls(ledger, address)

        return ledger

    def save(self, path: Path | str) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.export(), f, indent=2, default=str)
        return path

    @classmethod
    def load(cls, path: Path | str, config: Optional[LedgerConfig] = None) -> "Ledger":
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_export(data, config)
