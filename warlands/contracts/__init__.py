"""Contract implementations: Warrior, Land and RESOURCE."""

from .base import Contract, Ownable, ContractCaller
from .erc721 import ERC721
from .resource import ResourceToken, GameMasterToken
from .land import LandToken, LandMinter
from .warrior import WarriorToken

CONTRACT_TYPES: dict[str, type[Contract]] = {
    WarriorToken.KIND: WarriorToken,
    LandToken.KIND: LandToken,
    ResourceToken.KIND: ResourceToken,
}

__all__ = [
    "Contract",
    "Ownable",
    "ContractCaller",
    "ERC721",
    "WarriorToken",
    "LandToken",
    "LandMinter",
    "ResourceToken",
    "GameMasterToken",
    "CONTRACT_TYPES",
]
