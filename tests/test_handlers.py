"""Result-dict handlers used by the console."""

import pytest

from warlands import errors
from warlands.abi.handlers import LedgerHandlers

from tests.conftest import GENESIS


@pytest.fixture
def handlers(ledger, deployment):
    warrior, resource, land = deployment
    return LedgerHandlers(ledger, warrior, land, resource)


class TestHandlers:
    """Success and failure reporting."""

    def test_mint_pays_price(self, handlers, addr1):
        result = handlers.public_mint(addr1, 2)
        assert result["success"]
        assert result["result"] == [0, 1]
        assert len(result["events"]) == 2

    def test_failure_is_reported(self, handlers, addr1):
        result = handlers.claim_land(addr1, [0])
        assert result["success"] is False
        assert result["error"] == errors.NONEXISTENT_TOKEN

    def test_transfer_defaults_to_sender(self, handlers, addr1, addr2):
        handlers.public_mint(addr1, 1)
        assert handlers.transfer(addr1, addr2, 0)["success"]
        assert handlers.warrior.owner_of(0) == addr2

    def test_operator_transfer(self, handlers, addr1, addr2):
        handlers.public_mint(addr1, 1)
        assert handlers.transfer(addr2, addr2, 0, from_=addr1)["error"] == errors.TRANSFER_NOT_APPROVED
        handlers.set_approval_for_all(addr1, addr2, True)
        assert handlers.transfer(addr2, addr2, 0, from_=addr1)["success"]

    def test_withdraw_message(self, handlers, owner, addr1):
        handlers.public_mint(addr1, 3)
        result = handlers.withdraw(owner)
        assert result["message"] == "Withdrew 0.24 ETH"

    def test_owner_only(self, handlers, addr1):
        assert handlers.flip_sale_state(addr1)["error"] == errors.NOT_OWNER
        assert handlers.set_land_claim_time(addr1, 5)["error"] == errors.NOT_OWNER

    def test_account_view(self, handlers, ledger, addr1):
        handlers.public_mint(addr1, 2, stake=True)
        handlers.public_mint(addr1, 1)
        ledger.advance_time(30)

        info = handlers.get_account(addr1)
        assert info["label"] == "addr1"
        assert info["warriors"] == [2]
        assert [s["token_id"] for s in info["scouting"]] == [0, 1]
        assert info["scouting"][0]["elapsed"] == 30
        assert info["lands"] == []

        handlers.claim_land(addr1, [0, 1])
        info = handlers.get_account(addr1)
        assert info["lands"] == [0, 1]
        assert info["scouting"] == []

    def test_status(self, handlers, addr1):
        handlers.public_mint(addr1, 2, stake=True)
        status = handlers.get_status()
        assert status["sale_live"] is True
        assert status["price"] == "0.08"
        assert status["warrior_supply"] == 2
        assert status["scouting"] == 2
        assert status["treasury"] == "0.16"
        assert status["timestamp"] == GENESIS

    def test_advance_time(self, handlers):
        assert handlers.advance_time(10)["new_timestamp"] == GENESIS + 10
        assert handlers.advance_time(0)["success"] is False

    def test_transfer_resource(self, handlers, ledger, owner, addr1, addr2):
        resource = handlers.resource
        resource.connect(owner).editGameMasters([owner], [True])
        resource.connect(owner).mint(addr1, 10)

        assert handlers.transfer_resource(addr1, addr2, 4)["success"]
        assert handlers.get_account(addr2)["resource"] == 4
        assert handlers.transfer_resource(addr1, addr2, 7)["error"] == errors.INSUFFICIENT_BALANCE
