"""Environment-driven configuration."""

import pytest

from warlands.config import LedgerConfig
from warlands.units import parse_ether


def test_defaults():
    config = LedgerConfig()
    assert config.mint_price == parse_ether("0.08")
    assert config.land_claim_time == 86400
    assert config.account_count == 20
    assert config.resource_per_claim == 0
    assert config.land_resource_cost == 0


def test_from_env(monkeypatch):
    monkeypatch.setenv("WARLANDS_MINT_PRICE", "0.1")
    monkeypatch.setenv("WARLANDS_LAND_CLAIM_TIME", "60")
    monkeypatch.setenv("WARLANDS_ACCOUNT_COUNT", "3")
    monkeypatch.setenv("WARLANDS_GENESIS_TIMESTAMP", "1000")
    monkeypatch.setenv("WARLANDS_SAVE_DIR", "elsewhere")

    config = LedgerConfig.from_env()

    assert config.mint_price == parse_ether("0.1")
    assert config.land_claim_time == 60
    assert config.account_count == 3
    assert config.genesis_timestamp == 1000
    assert config.save_dir == "elsewhere"


def test_from_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("WARLANDS_LAND_CLAIM_TIME", "soon")
    with pytest.raises(ValueError):
        LedgerConfig.from_env()


def test_negative_values_rejected():
    with pytest.raises(ValueError):
        LedgerConfig(land_claim_time=-1)
