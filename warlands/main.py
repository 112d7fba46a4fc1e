"""Main entry point - console runner for the Warrior / RESOURCE / Land ledger."""

from __future__ import annotations
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from thefuzz import process

from warlands.abi.handlers import LedgerHandlers
from warlands.config import LedgerConfig
from warlands.contracts import LandToken, ResourceToken, WarriorToken
from warlands.models.events import EventType
from warlands.systems.ledger import Ledger


console = Console()

HISTORY_DIR = Path.home() / ".warlands"

COMMANDS = [
    ("as <account>", "Act as another account (owner, addr1, ...)"),
    ("accounts", "List signer accounts and their holdings"),
    ("mint <n> [stake]", "Mint n warriors at the current price, optionally scouting"),
    ("stake <ids..>", "Send owned warriors scouting"),
    ("claim <ids..>", "Claim land for finished scouts"),
    ("transfer <to> <id> [from]", "Transfer a warrior"),
    ("approve-all <operator> [on|off]", "Grant or revoke operator rights"),
    ("burn <id>", "Burn a warrior"),
    ("flip-sale", "Toggle the sale (owner)"),
    ("claim-time <seconds>", "Set the scouting time needed per claim (owner)"),
    ("withdraw", "Withdraw mint proceeds (owner)"),
    ("advance <seconds>", "Move the clock forward"),
    ("status", "Show contract status"),
    ("events [n]", "Show recent events (default: 10)"),
    ("receipts [n]", "Show recent transactions (default: 10)"),
    ("save [name]", "Save ledger (default: quicksave)"),
    ("load [name]", "Load ledger (default: quicksave)"),
    ("saves", "List available saves"),
    ("help", "Show this help"),
    ("quit", "Exit"),
]

COMMAND_NAMES = [c[0].split()[0] for c in COMMANDS] + ["exit"]


class Session:
    """A ledger with the three contracts deployed and wired together."""

    def __init__(self, config: Optional[LedgerConfig] = None):
        self.config = config or LedgerConfig.from_env()
        self.ledger: Optional[Ledger] = None
        self.warrior: Optional[WarriorToken] = None
        self.land: Optional[LandToken] = None
        self.resource: Optional[ResourceToken] = None
        self.handlers: Optional[LedgerHandlers] = None
        self.current: Optional[str] = None
        self._save_dir = Path(self.config.save_dir)

    def initialize(self) -> None:
        """Deploy and wire the contracts on a fresh ledger."""
        ledger = Ledger(self.config)
        owner = ledger.accounts[0]

        warrior = ledger.deploy(WarriorToken, owner)
        resource = ledger.deploy(ResourceToken, owner)
        land = ledger.deploy(LandToken, owner, warrior.address, resource.address)

        warrior.connect(owner).flipSaleState()
        warrior.connect(owner).setContractAddresses(land.address, resource.address)
        resource.connect(owner).editGameMasters([warrior.address, land.address], [True, True])

        self._attach(ledger)

    def _attach(self, ledger: Ledger) -> None:
        self.ledger = ledger
        self.warrior = self._find(WarriorToken)
        self.land = self._find(LandToken)
        self.resource = self._find(ResourceToken)
        self.handlers = LedgerHandlers(ledger, self.warrior, self.land, self.resource)
        self.current = ledger.accounts[0] if ledger.accounts else None

    def _find(self, contract_cls: type) -> Optional[object]:
        for contract in self.ledger.contracts():
            if isinstance(contract, contract_cls):
                return contract
        return None

    def save(self, filename: str = "quicksave") -> bool:
        if not self.ledger:
            console.print("[red]No ledger to save[/red]")
            return False

        self.ledger.emit(EventType.SAVE, f"Saved as {filename}")
        filepath = self.ledger.save(self._save_dir / f"{filename}.json")
        console.print(f"[green]Ledger saved to {filepath}[/green]")
        return True

    def load(self, filename: str = "quicksave") -> bool:
        filepath = self._save_dir / f"{filename}.json"

        if not filepath.exists():
            console.print(f"[red]Save file not found: {filepath}[/red]")
            return False

        try:
            ledger = Ledger.load(filepath, self.config)
        except (ValueError, KeyError) as e:
            # Bad JSON and schema mismatches both surface as ValueError
            console.print(f"[red]Could not load {filepath}: {escape(str(e))}[/red]")
            return False

        self._attach(ledger)
        ledger.emit(EventType.LOAD, f"Loaded {filename}")
        console.print(f"[green]Ledger loaded from {filepath}[/green]")
        return True

    def list_saves(self) -> list[str]:
        if not self._save_dir.exists():
            return []
        return [f.stem for f in self._save_dir.glob("*.json")]

    def resolve_account(self, name: str) -> Optional[str]:
        return self.ledger.resolve(name) if self.ledger else None

    def label(self, address: Optional[str]) -> str:
        return self.ledger.state.label(address) if self.ledger and address else "-"


def suggest_command(command: str, threshold: int = 60) -> Optional[str]:
    """Closest known command to a mistyped one."""
    match = process.extractOne(command, COMMAND_NAMES)
    if match and match[1] >= threshold:
        return match[0]
    return None


def print_help() -> None:
    table = Table(title="Commands", show_header=True, header_style="bold magenta")
    table.add_column("Command", style="cyan")
    table.add_column("Description")
    for cmd, desc in COMMANDS:
        table.add_row(cmd, desc)
    console.print(table)


def report(result: dict) -> None:
    """Print a handler result."""
    if result.get("success"):
        console.print(f"[green]{result.get('message', 'OK')}[/green]")
        for line in result.get("events", []):
            console.print(f"  • {escape(line)}")
    else:
        console.print(f"[red]Reverted: {result.get('error', 'unknown error')}[/red]")


def parse_ids(parts: list[str]) -> Optional[list[int]]:
    try:
        return [int(p) for p in parts]
    except ValueError:
        console.print("[red]Token ids must be numbers[/red]")
        return None


def handle_accounts(session: Session) -> None:
    table = Table(title="Accounts", show_header=True, header_style="bold magenta")
    for column in ("Label", "ETH", "Warriors", "Scouting", "Lands", "RESOURCE"):
        table.add_column(column)

    for address in session.ledger.accounts:
        info = session.handlers.get_account(address)
        if info["warriors"] or info["scouting"] or info["lands"] or address == session.current:
            marker = " *" if address == session.current else ""
            table.add_row(
                f"{info['label']}{marker}",
                info["eth"],
                ", ".join(map(str, info["warriors"])) or "-",
                ", ".join(str(s["token_id"]) for s in info["scouting"]) or "-",
                ", ".join(map(str, info["lands"])) or "-",
                str(info["resource"]),
            )

    console.print(table)
    console.print(f"[dim]{len(session.ledger.accounts)} signers; accounts with no holdings are hidden[/dim]")


def handle_status(session: Session) -> None:
    status = session.handlers.get_status()
    lines = [
        f"Block {status['block_number']} at {status['date']} (t={status['timestamp']})",
        f"Sale: {'[green]live[/green]' if status['sale_live'] else '[red]closed[/red]'} at {status['price']} ETH",
        f"Land claim time: {status['land_claim_time']}s",
        f"Warriors: {status['warrior_supply']} ({status['scouting']} scouting)",
        f"Lands: {status['land_supply']}",
        f"RESOURCE supply: {status['resource_supply']}",
        f"Treasury: {status['treasury']} ETH",
        f"Acting as: {session.label(session.current)}",
    ]
    console.print(Panel("\n".join(lines), title="Status", border_style="cyan"))


def handle_count(parts: list[str], default: int = 10) -> Optional[int]:
    """The optional numeric argument, or None (reported) when it is not a number."""
    if len(parts) < 2:
        return default
    try:
        return int(parts[1])
    except ValueError:
        console.print(f"[red]Expected a number, got '{parts[1]}'[/red]")
        return None


def handle_command(session: Session, parts: list[str]) -> bool:
    """Run one command. Returns False when the user asked to quit."""
    cmd = parts[0].lower()
    handlers = session.handlers
    me = session.current

    if cmd in ("quit", "exit"):
        return False

    elif cmd == "help":
        print_help()

    elif cmd == "as":
        if len(parts) < 2:
            console.print("[red]Usage: as <account>[/red]")
            return True
        address = session.resolve_account(parts[1])
        if address:
            session.current = address
            console.print(f"[green]Now acting as {session.label(address)}[/green]")
        else:
            console.print(f"[red]Unknown account: {parts[1]}[/red]")

    elif cmd == "accounts":
        handle_accounts(session)

    elif cmd == "mint":
        if len(parts) < 2:
            console.print("[red]Usage: mint <n> [stake][/red]")
            return True
        try:
            quantity = int(parts[1])
        except ValueError:
            console.print("[red]Quantity must be a number[/red]")
            return True
        stake = len(parts) > 2 and parts[2].lower() in ("stake", "scout", "true", "yes")
        report(handlers.public_mint(me, quantity, stake))

    elif cmd in ("stake", "claim"):
        ids = parse_ids(parts[1:])
        if ids is None:
            return True
        if cmd == "stake":
            report(handlers.stake(me, ids))
        else:
            report(handlers.claim_land(me, ids))

    elif cmd == "transfer":
        if len(parts) < 3:
            console.print("[red]Usage: transfer <to> <id> [from][/red]")
            return True
        to = session.resolve_account(parts[1])
        source = session.resolve_account(parts[3]) if len(parts) > 3 else me
        ids = parse_ids(parts[2:3])
        if not to or not source:
            console.print("[red]Unknown account[/red]")
        elif ids is not None:
            report(handlers.transfer(me, to, ids[0], from_=source))

    elif cmd == "approve-all":
        if len(parts) < 2:
            console.print("[red]Usage: approve-all <operator> [on|off][/red]")
            return True
        operator = session.resolve_account(parts[1])
        approved = not (len(parts) > 2 and parts[2].lower() in ("off", "false", "no"))
        if operator:
            report(handlers.set_approval_for_all(me, operator, approved))
        else:
            console.print(f"[red]Unknown account: {parts[1]}[/red]")

    elif cmd == "burn":
        if len(parts) < 2:
            console.print("[red]Usage: burn <id>[/red]")
            return True
        ids = parse_ids(parts[1:2])
        if ids:
            report(handlers.burn(me, ids[0]))

    elif cmd == "flip-sale":
        report(handlers.flip_sale_state(me))

    elif cmd == "claim-time":
        if len(parts) < 2:
            console.print("[red]Usage: claim-time <seconds>[/red]")
            return True
        ids = parse_ids(parts[1:2])
        if ids:
            report(handlers.set_land_claim_time(me, ids[0]))

    elif cmd == "withdraw":
        report(handlers.withdraw(me))

    elif cmd == "advance":
        seconds = handle_count(parts, default=1)
        if seconds is None:
            return True
        result = handlers.advance_time(seconds)
        if result.get("success"):
            console.print(f"[green]Advanced to {result['current_date']}[/green]")
        else:
            console.print(f"[red]{result.get('error', 'Failed to advance time')}[/red]")

    elif cmd == "status":
        handle_status(session)

    elif cmd == "events":
        count = handle_count(parts)
        if count is not None:
            console.print(escape(session.ledger.event_log.summary(count)))

    elif cmd == "receipts":
        count = handle_count(parts)
        if count is None:
            return True
        recent = session.ledger.receipts[-count:] if count > 0 else []
        if not recent:
            console.print("[dim]No transactions to show[/dim]")
        for receipt in recent:
            console.print(f"  {session.label(receipt.sender)}: {escape(receipt.summary())}")

    elif cmd == "save":
        session.save(parts[1] if len(parts) > 1 else "quicksave")

    elif cmd == "load":
        session.load(parts[1] if len(parts) > 1 else "quicksave")

    elif cmd == "saves":
        saves = session.list_saves()
        if saves:
            console.print("[bold]Available saves:[/bold]")
            for s in saves:
                console.print(f"  • {s}")
        else:
            console.print("[dim]No saves found[/dim]")

    else:
        suggestion = suggest_command(cmd)
        if suggestion:
            console.print(f"[yellow]Unknown command '{cmd}'. Did you mean '{suggestion}'?[/yellow]")
        else:
            console.print(f"[yellow]Unknown command '{cmd}'. Type 'help' for commands.[/yellow]")

    return True


def main():
    """Main entry point."""
    console.print(Panel(
        "[bold magenta]Warlands[/bold magenta]\n"
        "[dim]Mint warriors, send them scouting, claim land[/dim]",
        border_style="magenta",
    ))

    HISTORY_DIR.mkdir(exist_ok=True)
    session_prompt = PromptSession(
        history=FileHistory(str(HISTORY_DIR / "command_history")),
        auto_suggest=AutoSuggestFromHistory(),
    )

    session = Session()

    if len(sys.argv) > 1:
        if sys.argv[1] == "load" and len(sys.argv) > 2:
            if not session.load(sys.argv[2]):
                sys.exit(1)
        else:
            console.print("[yellow]Usage: python -m warlands.main [load <savename>][/yellow]")
            sys.exit(1)
    else:
        session.initialize()

    console.print("\n[dim]Type 'help' for commands[/dim]\n")

    while True:
        try:
            command = session_prompt.prompt(f"[{session.label(session.current)}] > ")

            if not command.strip():
                continue

            if not handle_command(session, command.strip().split()):
                console.print("[dim]Farewell.[/dim]")
                break

        except KeyboardInterrupt:
            console.print("\n[dim]Type 'quit' to exit[/dim]")

        except EOFError:
            console.print("\n[dim]Farewell.[/dim]")
            break

        except Exception as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")


if __name__ == "__main__":
    main()
