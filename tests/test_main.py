"""Console session: deployment wiring, commands and saves."""

import pytest

from warlands.config import LedgerConfig
from warlands.main import Session, console, handle_command, suggest_command

from tests.conftest import GENESIS


@pytest.fixture
def session(tmp_path):
    s = Session(LedgerConfig(genesis_timestamp=GENESIS, account_count=4, land_claim_time=60, save_dir=str(tmp_path)))
    s.initialize()
    return s


class TestSession:
    """A freshly wired session."""

    def test_initialize_wires_contracts(self, session):
        warrior, land, resource = session.warrior, session.land, session.resource
        assert warrior.sale_live()
        assert warrior.land_address() == land.address
        assert warrior.resource_address() == resource.address
        assert warrior.land_claim_time() == 60
        assert land.warrior() == warrior.address
        assert resource.is_game_master(warrior.address)
        assert resource.is_game_master(land.address)
        assert session.current == session.ledger.accounts[0]

    def test_commands_drive_the_ledger(self, session):
        addr1 = session.ledger.accounts[1]
        assert handle_command(session, ["as", "addr1"])
        assert session.current == addr1

        handle_command(session, ["mint", "2", "stake"])
        assert session.warrior.balance_of(session.warrior.address) == 2

        handle_command(session, ["claim", "0"])
        assert session.land.total_supply() == 0

        handle_command(session, ["advance", "60"])
        handle_command(session, ["claim", "0", "1"])
        assert session.land.balance_of(addr1) == 2

    def test_bad_input_does_not_crash(self, session):
        assert handle_command(session, ["mint", "lots"])
        assert handle_command(session, ["claim", "x"])
        assert handle_command(session, ["as", "nobody"])
        assert handle_command(session, ["stauts"])

    def test_quit(self, session):
        assert handle_command(session, ["quit"]) is False

    def test_save_and_load(self, session):
        handle_command(session, ["as", "addr1"])
        handle_command(session, ["mint", "1"])
        assert session.save("slot")
        assert session.list_saves() == ["slot"]

        fresh = Session(session.config)
        assert fresh.load("slot")
        assert fresh.warrior.address == session.warrior.address
        assert fresh.warrior.owner_of(0) == session.ledger.accounts[1]

    def test_load_missing(self, session):
        assert session.load("missing") is False

    @pytest.mark.parametrize("contents", ["{not json", "{\"version\": 1}", "{\"state\": {\"timestamp\": -1}}"])
    def test_load_corrupt(self, session, tmp_path, contents):
        (tmp_path / "broken.json").write_text(contents)
        ledger = session.ledger

        assert session.load("broken") is False
        assert handle_command(session, ["load", "broken"])
        assert session.ledger is ledger

    def test_advance_rejects_non_numbers(self, session):
        before = session.ledger.clock.now()
        with console.capture() as captured:
            handle_command(session, ["advance", "abc"])
        assert session.ledger.clock.now() == before
        assert "Expected a number" in captured.get()

    def test_receipts_count(self, session):
        with console.capture() as captured:
            handle_command(session, ["receipts", "0"])
        assert "No transactions to show" in captured.get()

        with console.capture() as captured:
            handle_command(session, ["receipts", "1"])
        output = captured.get()
        assert "editGameMasters" in output
        assert "flipSaleState" not in output


def test_suggest_command():
    assert suggest_command("stauts") == "status"
    assert suggest_command("withdrw") == "withdraw"
    assert suggest_command("zzzzzz") is None
