"""Shared fixtures: a funded ledger with Warrior, RESOURCE and Land deployed and wired."""

from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator

import pytest

from warlands.config import LedgerConfig
from warlands.contracts import LandToken, ResourceToken, WarriorToken
from warlands.errors import Revert
from warlands.systems.ledger import Ledger
from warlands.units import parse_ether

GENESIS = 1_700_000_000
PRICE = parse_ether("0.08")


@pytest.fixture
def config() -> LedgerConfig:
    return LedgerConfig(genesis_timestamp=GENESIS, account_count=5, save_dir="saves")


@pytest.fixture
def ledger(config: LedgerConfig) -> Ledger:
    return Ledger(config)


@pytest.fixture
def owner(ledger: Ledger) -> str:
    return ledger.accounts[0]


@pytest.fixture
def addr1(ledger: Ledger) -> str:
    return ledger.accounts[1]


@pytest.fixture
def addr2(ledger: Ledger) -> str:
    return ledger.accounts[2]


@pytest.fixture
def warrior(ledger: Ledger, owner: str) -> WarriorToken:
    """A Warrior deployment with the sale live (nothing else wired)."""
    contract = ledger.deploy(WarriorToken, owner)
    contract.connect(owner).flipSaleState()
    return contract


@pytest.fixture
def deployment(ledger: Ledger, owner: str) -> tuple[WarriorToken, ResourceToken, LandToken]:
    """All three contracts deployed and linked, claim time zero."""
    warrior = ledger.deploy(WarriorToken, owner)
    resource = ledger.deploy(ResourceToken, owner)
    land = ledger.deploy(LandToken, owner, warrior.address, resource.address)

    warrior.connect(owner).flipSaleState()
    warrior.connect(owner).setContractAddresses(land.address, resource.address)
    warrior.connect(owner).setLandClaimTime(0)
    resource.connect(owner).editGameMasters([warrior.address, land.address], [True, True])
    return warrior, resource, land


@contextmanager
def reverts(reason: str) -> Iterator[None]:
    """Expect the block to revert with exactly ``reason``."""
    with pytest.raises(Revert) as exc:
        yield
    assert exc.value.reason == reason
