"""Contract base classes - storage lookup, call context, events and ownership."""

from __future__ import annotations
import functools
from typing import Any, Callable, ClassVar, Optional, TYPE_CHECKING

from pydantic import BaseModel

from warlands import errors
from warlands.errors import AuthorizationFault, InvariantFault
from warlands.models.events import Event, EventEffect, EventType
from warlands.models.ledger_state import ZERO_ADDRESS

if TYPE_CHECKING:
    from warlands.config import LedgerConfig
    from warlands.systems.ledger import CallContext, Ledger


class ContractCaller:
    """Sends transactions to a contract as a fixed sender.

    ``warrior.connect(addr1).publicMint(3, False, value=price)``. Both ABI
    names and snake_case handler names resolve.
    """

    def __init__(self, ledger: "Ledger", address: str, sender: str):
        self._ledger = ledger
        self._address = address
        self._sender = sender

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)

        def send(*args: Any, value: int = 0) -> Any:
            return self._ledger.transact(self._sender, self._address, name, *args, value=value)

        return send


class RemoteContract:
    """Nested-call handle used by one contract to call another."""

    def __init__(self, ledger: "Ledger", address: str, caller: str):
        self._ledger = ledger
        self._address = address
        self._caller = caller

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)

        def call(*args: Any) -> Any:
            return self._ledger.call(self._caller, self._address, name, *args)

        return call


class Contract:
    """A deployed contract. All storage lives in the ledger state."""

    KIND: ClassVar[str] = ""
    LABEL: ClassVar[str] = ""

    def __init__(self, ledger: "Ledger", address: str):
        self.ledger = ledger
        self.address = address

    @classmethod
    def constructor(cls, deployer: str, config: "LedgerConfig", *args: Any) -> BaseModel:
        """Build the initial storage for a new deployment."""
        raise NotImplementedError

    @property
    def state(self) -> Any:
        return self.ledger.state.contracts[self.address]

    @property
    def msg(self) -> "CallContext":
        return self.ledger.context

    @property
    def block_timestamp(self) -> int:
        return self.ledger.clock.now()

    def connect(self, sender: str) -> ContractCaller:
        """Handle for sending transactions as ``sender``."""
        return ContractCaller(self.ledger, self.address, sender)

    def _remote(self, address: str) -> RemoteContract:
        return RemoteContract(self.ledger, address, self.address)

    def _label(self, address: str) -> str:
        return self.ledger.state.label(address)

    def _emit(
        self,
        event_type: EventType,
        description: str,
        effects: Optional[list[EventEffect]] = None,
        **metadata: Any,
    ) -> Event:
        return self.ledger.emit(event_type, description, contract=self.address, effects=effects, **metadata)

    def abi(self) -> list[dict[str, Any]]:
        return self.ledger.registry.get_abi(self.KIND)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.address})"


def only_owner(func: Callable[..., Any]) -> Callable[..., Any]:
    """Reject the call unless msg.sender is the contract owner."""

    @functools.wraps(func)
    def wrapper(self: "Ownable", *args: Any, **kwargs: Any) -> Any:
        if self.msg.sender != self.state.owner:
            raise AuthorizationFault(errors.NOT_OWNER, {"caller": self.msg.sender})
        return func(self, *args, **kwargs)

    return wrapper


class Ownable(Contract):
    """Single-owner access control."""

    def owner(self) -> str:
        return self.state.owner

    @only_owner
    def transfer_ownership(self, new_owner: str) -> None:
        if new_owner == ZERO_ADDRESS:
            raise InvariantFault(errors.NEW_OWNER_IS_ZERO)
        self._set_owner(new_owner)

    @only_owner
    def renounce_ownership(self) -> None:
        self._set_owner(ZERO_ADDRESS)

    def _set_owner(self, new_owner: str) -> None:
        old_owner = self.state.owner
        self.state.owner = new_owner
        self._emit(
            EventType.OWNERSHIP_TRANSFERRED,
            f"Ownership of {self._label(self.address)} moved from {self._label(old_owner)} to {self._label(new_owner)}",
            effects=[EventEffect(target_type="config", field="owner", old_value=old_owner, new_value=new_owner)],
        )
