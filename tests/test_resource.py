"""RESOURCE token: game masters, privileged mint/burn and ERC20 transfers."""

import pytest

from warlands import errors
from warlands.contracts import ResourceToken
from warlands.errors import AuthorizationFault, InvariantFault
from warlands.models.ledger_state import ZERO_ADDRESS

from tests.conftest import reverts


@pytest.fixture
def resource(ledger, owner):
    contract = ledger.deploy(ResourceToken, owner)
    contract.connect(owner).editGameMasters([owner], [True])
    return contract


class TestGameMasters:
    """Owner-managed mint/burn capability."""

    def test_metadata(self, resource):
        assert resource.name() == "RESOURCE"
        assert resource.symbol() == "RESOURCE"
        assert resource.decimals() == 18

    def test_edit_game_masters(self, resource, owner, addr1, addr2):
        resource.connect(owner).editGameMasters([addr1, addr2], [True, False])
        assert resource.is_game_master(addr1) is True
        assert resource.is_game_master(addr2) is False

    def test_length_mismatch(self, resource, owner, addr1):
        with pytest.raises(InvariantFault) as exc:
            resource.connect(owner).editGameMasters([addr1], [True, False])
        assert exc.value.reason == errors.ARRAY_LENGTH_MISMATCH
        assert resource.is_game_master(addr1) is False

    def test_only_owner_edits(self, resource, addr1):
        with reverts(errors.NOT_OWNER):
            resource.connect(addr1).editGameMasters([addr1], [True])

    def test_non_game_master_cannot_mint(self, resource, addr1):
        with pytest.raises(AuthorizationFault) as exc:
            resource.connect(addr1).mint(addr1, 100)
        assert exc.value.reason == errors.NOT_GAME_MASTER
        assert resource.total_supply() == 0

    def test_revoked_game_master(self, resource, owner, addr1):
        resource.connect(owner).editGameMasters([owner], [False])
        with reverts(errors.NOT_GAME_MASTER):
            resource.connect(owner).mint(addr1, 1)

    def test_mint_and_burn(self, resource, owner, addr1):
        resource.connect(owner).mint(addr1, 100)
        resource.connect(owner).burn(addr1, 40)
        assert resource.balance_of(addr1) == 60
        assert resource.total_supply() == 60

    def test_burn_underflow(self, resource, owner, addr1):
        resource.connect(owner).mint(addr1, 10)
        with reverts(errors.INSUFFICIENT_BALANCE):
            resource.connect(owner).burn(addr1, 11)
        assert resource.balance_of(addr1) == 10

    def test_mint_to_zero(self, resource, owner):
        with reverts(errors.MINT_TO_ZERO):
            resource.connect(owner).mint(ZERO_ADDRESS, 1)


class TestTransfers:
    """Holder transfers and allowances."""

    @pytest.fixture(autouse=True)
    def funded(self, resource, owner, addr1):
        resource.connect(owner).mint(addr1, 100)

    def test_transfer(self, resource, addr1, addr2):
        receipt = resource.connect(addr1).transfer(addr2, 30)
        assert receipt.return_value is True
        assert resource.balance_of(addr1) == 70
        assert resource.balance_of(addr2) == 30
        assert resource.total_supply() == 100

    def test_transfer_exceeds_balance(self, resource, addr1, addr2):
        with reverts(errors.INSUFFICIENT_BALANCE):
            resource.connect(addr1).transfer(addr2, 101)

    def test_transfer_to_zero(self, resource, addr1):
        with reverts(errors.TRANSFER_TO_ZERO):
            resource.connect(addr1).transfer(ZERO_ADDRESS, 1)

    def test_allowance_flow(self, resource, addr1, addr2, ledger):
        addr3 = ledger.accounts[3]
        resource.connect(addr1).approve(addr2, 50)
        assert resource.allowance(addr1, addr2) == 50

        resource.connect(addr2).transferFrom(addr1, addr3, 20)
        assert resource.allowance(addr1, addr2) == 30
        assert resource.balance_of(addr3) == 20

        with reverts(errors.INSUFFICIENT_ALLOWANCE):
            resource.connect(addr2).transferFrom(addr1, addr3, 31)
        assert resource.allowance(addr1, addr2) == 30
