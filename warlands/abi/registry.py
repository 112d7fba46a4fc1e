"""ABI registry - the externally callable surface of each contract kind."""

from __future__ import annotations
from typing import Any, Optional
from pydantic import BaseModel, Field

SOLIDITY_TYPES = {"address", "uint256", "bool", "address[]", "uint256[]", "bool[]"}


class Param(BaseModel):
    """A typed method input or output."""
    name: str = ""
    type: str  # One of SOLIDITY_TYPES

    def to_abi(self) -> dict[str, str]:
        return {"name": self.name, "type": self.type, "internalType": self.type}


class Method(BaseModel):
    """A contract entry point."""
    name: str  # ABI name, e.g. "publicMint"
    handler: str  # Python attribute on the contract class, e.g. "public_mint"
    description: str = ""
    params: list[Param] = Field(default_factory=list)
    returns: list[Param] = Field(default_factory=list)
    payable: bool = False
    view: bool = False

    @property
    def is_constructor(self) -> bool:
        return self.name == "constructor"

    @property
    def state_mutability(self) -> str:
        if self.view:
            return "view"
        if self.payable:
            return "payable"
        return "nonpayable"

    def signature(self) -> str:
        """Canonical signature, e.g. ``publicMint(uint256,bool)``."""
        return f"{self.name}({','.join(p.type for p in self.params)})"

    def to_abi_schema(self) -> dict[str, Any]:
        """Convert to a JSON ABI fragment."""
        if self.is_constructor:
            return {
                "type": "constructor",
                "inputs": [p.to_abi() for p in self.params],
                "stateMutability": self.state_mutability,
            }
        return {
            "type": "function",
            "name": self.name,
            "inputs": [p.to_abi() for p in self.params],
            "outputs": [p.to_abi() for p in self.returns],
            "stateMutability": self.state_mutability,
        }


def _p(name: str, type_: str) -> Param:
    return Param(name=name, type=type_)


def _r(type_: str) -> list[Param]:
    return [Param(type=type_)]


class AbiRegistry:
    """Registry of all contract methods, keyed by contract kind."""

    def __init__(self) -> None:
        self._methods: dict[str, dict[str, Method]] = {}
        self._register_core_methods()

    def _register_core_methods(self) -> None:
        """Register the Warrior, Land and RESOURCE surfaces."""
        for kind in ("warrior", "land", "resource"):
            self._register_ownable(kind)

        for kind in ("warrior", "land"):
            self._register_erc721(kind)

        self._register_warrior()
        self._register_land()
        self._register_resource()

    def _register_ownable(self, kind: str) -> None:
        self.register(kind, Method(
            name="owner", handler="owner", view=True, returns=_r("address"),
            description="Current contract owner.",
        ))
        self.register(kind, Method(
            name="transferOwnership", handler="transfer_ownership",
            params=[_p("newOwner", "address")],
            description="Hand the owner role to another account (owner only).",
        ))
        self.register(kind, Method(
            name="renounceOwnership", handler="renounce_ownership",
            description="Give up the owner role for good (owner only).",
        ))

    def _register_erc721(self, kind: str) -> None:
        """Surface shared by every NFT contract."""
        views = [
            Method(name="name", handler="name", view=True, returns=_r("string")),
            Method(name="symbol", handler="symbol", view=True, returns=_r("string")),
            Method(name="totalSupply", handler="total_supply", view=True, returns=_r("uint256")),
            Method(name="balanceOf", handler="balance_of", view=True,
                   params=[_p("owner", "address")], returns=_r("uint256")),
            Method(name="ownerOf", handler="owner_of", view=True,
                   params=[_p("tokenId", "uint256")], returns=_r("address")),
            Method(name="exists", handler="exists", view=True,
                   params=[_p("tokenId", "uint256")], returns=_r("bool")),
            Method(name="getApproved", handler="get_approved", view=True,
                   params=[_p("tokenId", "uint256")], returns=_r("address")),
            Method(name="isApprovedForAll", handler="is_approved_for_all", view=True,
                   params=[_p("owner", "address"), _p("operator", "address")], returns=_r("bool")),
        ]
        for method in views:
            self.register(kind, method)

        self.register(kind, Method(
            name="approve", handler="approve",
            params=[_p("to", "address"), _p("tokenId", "uint256")],
            description="Approve a single spender for one token.",
        ))
        self.register(kind, Method(
            name="setApprovalForAll", handler="set_approval_for_all",
            params=[_p("operator", "address"), _p("approved", "bool")],
            description="Grant or revoke blanket transfer rights over all of the caller's tokens.",
        ))
        self.register(kind, Method(
            name="transferFrom", handler="transfer_from",
            params=[_p("from", "address"), _p("to", "address"), _p("tokenId", "uint256")],
            description="Move a token; caller must be the holder, an operator or the approved spender.",
        ))

    def _register_warrior(self) -> None:
        kind = "warrior"
        self.register(kind, Method(name="constructor", handler="constructor"))

        self.register(kind, Method(
            name="publicMint", handler="public_mint", payable=True,
            params=[_p("quantity", "uint256"), _p("stake", "bool")],
            returns=_r("uint256[]"),
            description="Mint warriors for exactly price * quantity; optionally start scouting at once.",
        ))
        self.register(kind, Method(
            name="stake", handler="stake",
            params=[_p("tokenIds", "uint256[]")],
            description="Send owned warriors scouting.",
        ))
        self.register(kind, Method(
            name="claimLand", handler="claim_land",
            params=[_p("tokenIds", "uint256[]")],
            returns=_r("uint256[]"),
            description="Convert finished scouting into Land; all ids succeed or none do.",
        ))
        self.register(kind, Method(
            name="burn", handler="burn",
            params=[_p("tokenId", "uint256")],
            description="Destroy a warrior for good.",
        ))

        # Owner configuration
        self.register(kind, Method(name="flipSaleState", handler="flip_sale_state"))
        self.register(kind, Method(
            name="setContractAddresses", handler="set_contract_addresses",
            params=[_p("land", "address"), _p("resource", "address")],
        ))
        self.register(kind, Method(
            name="setLandClaimTime", handler="set_land_claim_time",
            params=[_p("duration", "uint256")],
        ))
        self.register(kind, Method(
            name="setResourcePerClaim", handler="set_resource_per_claim",
            params=[_p("amount", "uint256")],
        ))
        self.register(kind, Method(name="withdraw", handler="withdraw"))

        # Views
        self.register(kind, Method(name="price", handler="price", view=True, returns=_r("uint256")))
        self.register(kind, Method(name="saleLive", handler="sale_live", view=True, returns=_r("bool")))
        self.register(kind, Method(name="landClaimTime", handler="land_claim_time", view=True, returns=_r("uint256")))
        self.register(kind, Method(name="landAddress", handler="land_address", view=True, returns=_r("address")))
        self.register(kind, Method(name="resourceAddress", handler="resource_address", view=True, returns=_r("address")))
        self.register(kind, Method(name="resourcePerClaim", handler="resource_per_claim", view=True, returns=_r("uint256")))
        self.register(kind, Method(
            name="activities", handler="activities", view=True,
            params=[_p("tokenId", "uint256")],
            returns=[Param(name="staker", type="address"), Param(name="startTime", type="uint256")],
        ))

    def _register_land(self) -> None:
        kind = "land"
        self.register(kind, Method(
            name="constructor", handler="constructor",
            params=[_p("warrior", "address"), _p("resource", "address")],
        ))
        self.register(kind, Method(
            name="mintFor", handler="mint_for",
            params=[_p("account", "address")],
            returns=_r("uint256"),
            description="Mint one Land parcel; only the Warrior contract may call this.",
        ))
        self.register(kind, Method(name="warrior", handler="warrior", view=True, returns=_r("address")))
        self.register(kind, Method(name="resource", handler="resource", view=True, returns=_r("address")))
        self.register(kind, Method(name="resourceCost", handler="resource_cost", view=True, returns=_r("uint256")))

    def _register_resource(self) -> None:
        kind = "resource"
        self.register(kind, Method(name="constructor", handler="constructor"))

        self.register(kind, Method(
            name="editGameMasters", handler="edit_game_masters",
            params=[_p("accounts", "address[]"), _p("flags", "bool[]")],
            description="Grant or revoke mint/burn rights (owner only).",
        ))
        self.register(kind, Method(
            name="mint", handler="mint",
            params=[_p("account", "address"), _p("amount", "uint256")],
            description="Create RESOURCE for an account (game masters only).",
        ))
        self.register(kind, Method(
            name="burn", handler="burn",
            params=[_p("account", "address"), _p("amount", "uint256")],
            description="Destroy RESOURCE held by an account (game masters only).",
        ))
        self.register(kind, Method(
            name="transfer", handler="transfer",
            params=[_p("to", "address"), _p("amount", "uint256")], returns=_r("bool"),
        ))
        self.register(kind, Method(
            name="approve", handler="approve",
            params=[_p("spender", "address"), _p("amount", "uint256")], returns=_r("bool"),
        ))
        self.register(kind, Method(
            name="transferFrom", handler="transfer_from",
            params=[_p("from", "address"), _p("to", "address"), _p("amount", "uint256")], returns=_r("bool"),
        ))

        views = [
            Method(name="name", handler="name", view=True, returns=_r("string")),
            Method(name="symbol", handler="symbol", view=True, returns=_r("string")),
            Method(name="decimals", handler="decimals", view=True, returns=_r("uint8")),
            Method(name="totalSupply", handler="total_supply", view=True, returns=_r("uint256")),
            Method(name="balanceOf", handler="balance_of", view=True,
                   params=[_p("account", "address")], returns=_r("uint256")),
            Method(name="allowance", handler="allowance", view=True,
                   params=[_p("owner", "address"), _p("spender", "address")], returns=_r("uint256")),
            Method(name="isGameMaster", handler="is_game_master", view=True,
                   params=[_p("account", "address")], returns=_r("bool")),
        ]
        for method in views:
            self.register(kind, method)

    def register(self, kind: str, method: Method) -> None:
        """Register a method for a contract kind."""
        for param in method.params:
            if param.type not in SOLIDITY_TYPES:
                raise ValueError(f"Unsupported parameter type {param.type!r} in {method.name}")
        self._methods.setdefault(kind, {})[method.name] = method

    def get(self, kind: str, name: str) -> Optional[Method]:
        """Get a method by ABI name or by Python handler name."""
        methods = self._methods.get(kind, {})
        if name in methods:
            return methods[name]
        for method in methods.values():
            if method.handler == name:
                return method
        return None

    def list_methods(self, kind: str) -> list[Method]:
        return [m for m in self._methods.get(kind, {}).values() if not m.is_constructor]

    def list_kinds(self) -> list[str]:
        return list(self._methods)

    def get_abi(self, kind: str) -> list[dict[str, Any]]:
        """Get the full JSON ABI for a contract kind."""
        return [m.to_abi_schema() for m in self._methods.get(kind, {}).values()]
