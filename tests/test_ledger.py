"""Ledger substrate: atomic transactions, receipts, events, clock and persistence."""

import pytest

from warlands import errors
from warlands.config import LedgerConfig
from warlands.contracts import LandToken, WarriorToken
from warlands.errors import AuthorizationFault, InvariantFault, PaymentFault, Revert, StateFault
from warlands.models.events import EventType
from warlands.models.receipts import TxStatus
from warlands.systems.ledger import Ledger, derive_address
from warlands.units import format_ether, parse_ether

from tests.conftest import GENESIS, PRICE, reverts


# ============================================================================
# ACCOUNTS
# ============================================================================


class TestAccounts:
    """Signer creation and lookup."""

    def test_signers_funded(self, ledger, config):
        assert len(ledger.accounts) == config.account_count
        assert all(ledger.native_balance(a) == config.initial_balance for a in ledger.accounts)

    def test_labels(self, ledger, owner, addr1):
        assert ledger.state.label(owner) == "owner"
        assert ledger.resolve("addr1") == addr1
        assert ledger.resolve(addr1.upper().replace("0X", "0x")) == addr1
        assert ledger.resolve("nobody") is None

    def test_addresses_are_deterministic(self, ledger, addr1):
        assert addr1 == derive_address("account:addr1")
        assert Ledger(LedgerConfig(account_count=2)).accounts[1] == addr1

    def test_duplicate_label(self, ledger):
        with pytest.raises(ValueError):
            ledger.create_account("addr1")

    def test_unknown_contract(self, ledger, addr1):
        with pytest.raises(StateFault) as exc:
            ledger.transact(addr1, derive_address("nowhere"), "flipSaleState")
        assert exc.value.reason == errors.UNKNOWN_CONTRACT


# ============================================================================
# TRANSACTIONS
# ============================================================================


class TestTransactions:
    """All-or-nothing execution and receipts."""

    def test_block_and_nonce_advance_on_success(self, ledger, warrior, addr1):
        block = ledger.state.block_number
        warrior.connect(addr1).publicMint(1, False, value=PRICE)

        assert ledger.state.block_number == block + 1
        assert ledger.state.nonces[addr1] == 1
        assert ledger.receipts[-1].block_number == block + 1

    def test_revert_restores_state(self, ledger, warrior, addr1):
        block = ledger.state.block_number
        snapshot = ledger.state.model_dump()

        with pytest.raises(Revert):
            warrior.connect(addr1).publicMint(2, False, value=PRICE)

        assert ledger.state.model_dump() == snapshot
        assert ledger.state.block_number == block
        assert addr1 not in ledger.state.nonces

    def test_reverted_receipt(self, ledger, warrior, addr1):
        with reverts(errors.INCORRECT_PAYMENT):
            warrior.connect(addr1).publicMint(1, False, value=1)

        receipt = ledger.receipts[-1]
        assert receipt.status == TxStatus.REVERTED
        assert receipt.revert_reason == errors.INCORRECT_PAYMENT
        assert receipt.revert_details == {"sent": 1, "required": PRICE}
        assert receipt.events == []
        assert "reverted" in receipt.summary()

    def test_successful_receipt(self, warrior, addr1):
        receipt = warrior.connect(addr1).publicMint(2, False, value=PRICE * 2)
        assert receipt.succeeded
        assert receipt.method == "publicMint"
        assert receipt.value_summary() == "0.16 ETH"
        assert [e.event_type for e in receipt.events] == [EventType.TRANSFER, EventType.TRANSFER]

    def test_view_through_transact(self, warrior, addr1):
        assert warrior.connect(addr1).balanceOf(addr1) == 0
        assert warrior.connect(addr1).saleLive() is True

    def test_snake_case_names_resolve(self, warrior, owner):
        warrior.connect(owner).flip_sale_state()
        assert warrior.sale_live() is False

    def test_view_rejects_mutating_method(self, ledger, warrior):
        with reverts(errors.NOT_A_VIEW):
            ledger.view(warrior.address, "flipSaleState")

    def test_unknown_method(self, ledger, warrior, addr1):
        with pytest.raises(InvariantFault) as exc:
            warrior.connect(addr1).mintForFree(1)
        assert exc.value.reason == errors.UNKNOWN_METHOD
        assert ledger.receipts[-1].status == TxStatus.REVERTED

    def test_value_on_non_payable(self, ledger, warrior, owner):
        with pytest.raises(PaymentFault) as exc:
            warrior.connect(owner).flipSaleState(value=1)
        assert exc.value.reason == errors.NON_PAYABLE
        assert ledger.native_balance(warrior.address) == 0

    @pytest.mark.parametrize("args", [
        ("3", False),
        (True, False),
        (-1, False),
        (1,),
    ])
    def test_invalid_arguments(self, warrior, addr1, args):
        with reverts(errors.INVALID_ARGUMENT):
            warrior.connect(addr1).publicMint(*args, value=PRICE)

    def test_bad_address_argument(self, warrior, owner):
        with pytest.raises(InvariantFault) as exc:
            warrior.connect(owner).transferOwnership("0x1234")
        assert exc.value.details["issues"][0]["code"] == "INVALID_ADDRESS"

    def test_nested_call_outside_transaction(self, ledger, deployment, addr1):
        _, _, land = deployment
        with pytest.raises(RuntimeError):
            ledger.call(addr1, land.address, "mintFor", addr1)

    def test_nested_call_sees_calling_contract(self, ledger, deployment, addr1):
        warrior, _, land = deployment
        warrior.connect(addr1).publicMint(1, True, value=PRICE)
        receipt = warrior.connect(addr1).claimLand([0])

        land_events = [e for e in receipt.events if e.contract == land.address]
        assert land_events
        assert all(e.actor == "warrior" for e in land_events)

    def test_value_on_view(self, ledger, warrior, addr1):
        with reverts(errors.NON_PAYABLE):
            warrior.connect(addr1).totalSupply(value=PRICE)
        assert ledger.native_balance(warrior.address) == 0


# ============================================================================
# SENDERS
# ============================================================================


class TestSenders:
    """Only externally owned accounts submit transactions."""

    def test_contract_cannot_send_transactions(self, ledger, deployment, addr1):
        warrior, resource, land = deployment
        receipts = len(ledger.receipts)

        with pytest.raises(AuthorizationFault) as exc:
            land.connect(warrior.address).mintFor(addr1)
        assert exc.value.reason == errors.NOT_EXTERNAL_SENDER

        with reverts(errors.NOT_EXTERNAL_SENDER):
            resource.connect(warrior.address).mint(addr1, 10**24)

        assert land.total_supply() == 0
        assert resource.balance_of(addr1) == 0
        assert len(ledger.receipts) == receipts

    def test_contract_cannot_deploy(self, ledger, warrior):
        with reverts(errors.NOT_EXTERNAL_SENDER):
            ledger.deploy(WarriorToken, warrior.address)

    @pytest.mark.parametrize("sender", ["owner", "0x1234", ""])
    def test_malformed_sender(self, warrior, sender):
        with reverts(errors.INVALID_ARGUMENT):
            warrior.connect(sender).flipSaleState()
        assert warrior.sale_live() is True


# ============================================================================
# EVENTS
# ============================================================================


class TestEvents:
    """Events commit with their transaction and never otherwise."""

    def test_events_committed(self, ledger, warrior, addr1):
        before = ledger.event_log.count()
        receipt = warrior.connect(addr1).publicMint(3, False, value=PRICE * 3)

        assert ledger.event_log.count() == before + 3
        transfers = ledger.event_log.get_by_block(receipt.block_number)
        assert all(e.tx_id == receipt.id for e in transfers)

    def test_events_discarded_on_revert(self, ledger, warrior, addr1):
        before = ledger.event_log.count()
        with pytest.raises(Revert):
            warrior.connect(addr1).publicMint(3, False, value=PRICE)
        assert ledger.event_log.count() == before

    def test_query_by_contract_and_type(self, ledger, deployment, addr1):
        warrior, _, land = deployment
        warrior.connect(addr1).publicMint(1, True, value=PRICE)
        warrior.connect(addr1).claimLand([0])

        assert len(ledger.event_log.get_by_type(EventType.STAKED)) == 1
        assert len(ledger.event_log.get_by_type(EventType.LAND_CLAIMED)) == 1
        assert ledger.event_log.get_by_contract(land.address)[-1].metadata["token_id"] == 0

    def test_report(self, ledger, warrior, addr1):
        warrior.connect(addr1).publicMint(1, False, value=PRICE)
        report = ledger.event_log.generate_report()
        assert "WARRIOR #0 minted to addr1" in report

    def test_search_and_since(self, ledger, warrior, addr1):
        receipt = warrior.connect(addr1).publicMint(2, False, value=PRICE * 2)

        assert [e.metadata["token_id"] for e in ledger.event_log.search("minted to addr1")] == [0, 1]
        assert len(ledger.event_log.get_since_block(receipt.block_number)) == 2
        assert "Effects:" in ledger.event_log.detailed_summary(1)

    def test_ledger_summary(self, ledger, warrior, addr1):
        warrior.connect(addr1).publicMint(1, False, value=PRICE)
        summary = ledger.state.summary()
        assert "warrior (warrior)" in summary
        assert "supply 1" in summary
        assert ledger.clock.get_current_time()["block_number"] == ledger.state.block_number


# ============================================================================
# CLOCK
# ============================================================================


class TestClock:
    """Monotonic block time, moved only between transactions."""

    def test_genesis(self, ledger):
        assert ledger.clock.now() == GENESIS

    def test_advance(self, ledger):
        result = ledger.advance_time(3600)
        assert result["success"]
        assert ledger.clock.now() == GENESIS + 3600
        assert ledger.event_log.get_by_type(EventType.TIME_ADVANCE)

    @pytest.mark.parametrize("seconds", [0, -5, True, 1.5, 20 * 365 * 86400])
    def test_rejected_advances(self, ledger, seconds):
        assert ledger.advance_time(seconds)["success"] is False
        assert ledger.clock.now() == GENESIS

    def test_set_time_never_goes_back(self, ledger):
        assert ledger.clock.set_time(GENESIS - 1)["success"] is False
        assert ledger.clock.set_time(GENESIS + 10)["success"] is True
        assert ledger.clock.now() == GENESIS + 10

    def test_transactions_do_not_move_time(self, ledger, warrior, addr1):
        warrior.connect(addr1).publicMint(1, False, value=PRICE)
        assert ledger.clock.now() == GENESIS


# ============================================================================
# PERSISTENCE
# ============================================================================


class TestPersistence:
    """Save and load a whole ledger."""

    def test_save_and_load(self, ledger, deployment, owner, addr1, tmp_path):
        warrior, resource, land = deployment
        warrior.connect(owner).setLandClaimTime(100)
        warrior.connect(addr1).publicMint(2, True, value=PRICE * 2)

        path = ledger.save(tmp_path / "ledger.json")
        loaded = Ledger.load(path)

        restored = loaded.contract_at(warrior.address)
        assert isinstance(restored, WarriorToken)
        assert isinstance(loaded.contract_at(land.address), LandToken)
        assert restored.activities(1) == (addr1, GENESIS)
        assert restored.balance_of(warrior.address) == 2
        assert loaded.accounts == ledger.accounts
        assert len(loaded.receipts) == len(ledger.receipts)
        assert loaded.event_log.count() == ledger.event_log.count()
        assert loaded.native_balance(warrior.address) == PRICE * 2

        loaded.advance_time(100)
        restored.connect(addr1).claimLand([0, 1])
        assert loaded.contract_at(land.address).balance_of(addr1) == 2
        # The saved-from ledger is untouched
        assert land.total_supply() == 0


# ============================================================================
# UNITS
# ============================================================================


class TestUnits:
    """Ether/wei conversion."""

    def test_parse(self):
        assert parse_ether("0.08") == 80_000_000_000_000_000
        assert parse_ether("0.24") == 3 * parse_ether("0.08")
        assert parse_ether(1) == 10**18

    def test_format(self):
        assert format_ether(parse_ether("0.24")) == "0.24"
        assert format_ether(0) == "0"

    def test_too_precise(self):
        with pytest.raises(ValueError):
            parse_ether("0.0000000000000000001")
