#!/usr/bin/env python3
"""
Credit management CLI.

Grants credits (top-ups, signup bonuses, manual adjustments) and shows
balances through the configured credit ledger.

Usage:
    python manage_credits.py balance <user-id>
    python manage_credits.py grant <user-id> 100 --reason "Manual top-up"
    python manage_credits.py reveals <user-id>
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.table import Table

from api.dependencies import get_container
from modules.ledger.interfaces import ICreditLedger
from shared.exceptions import LeadvaultError

console = Console()


async def show_balance(ledger: ICreditLedger, user_id: str) -> None:
    balance = await ledger.get_balance(user_id)
    credits = "unlimited" if balance.unlimited else str(balance.credits_remaining)
    console.print(f"[cyan]{user_id}[/cyan]: {credits} credit(s)")


async def grant(ledger: ICreditLedger, user_id: str, amount: int, reason: str) -> None:
    result = await ledger.grant_credits(user_id, amount, reason)
    console.print(
        f"[green]✓[/green] Granted {result.amount} credit(s) to {user_id}: "
        f"{result.balance_before} → {result.balance_after}"
    )


async def show_reveals(ledger: ICreditLedger, user_id: str) -> None:
    records = await ledger.list_revealed(user_id)
    if not records:
        console.print("[dim]No reveals.[/dim]")
        return

    table = Table(title=f"Reveals for {user_id}")
    table.add_column("Listing", style="cyan")
    table.add_column("Cost", justify="right")
    table.add_column("Revealed At")
    for record in records:
        table.add_row(record.listing_id, str(record.credit_cost), record.created_at.strftime("%Y-%m-%d %H:%M:%S"))
    console.print(table)
    console.print(f"Total credits spent: {sum(r.credit_cost for r in records)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage user credits")
    commands = parser.add_subparsers(dest="command", required=True)

    balance = commands.add_parser("balance", help="Show a user's balance")
    balance.add_argument("user_id")

    grant_cmd = commands.add_parser("grant", help="Add credits to a user's balance")
    grant_cmd.add_argument("user_id")
    grant_cmd.add_argument("amount", type=int)
    grant_cmd.add_argument("--reason", default="Manual credit addition")

    reveals = commands.add_parser("reveals", help="List a user's reveals")
    reveals.add_argument("user_id")
    return parser


async def run(args: argparse.Namespace, ledger: ICreditLedger) -> int:
    """Execute one command. Returns the process exit code."""
    try:
        if args.command == "balance":
            await show_balance(ledger, args.user_id)
        elif args.command == "grant":
            await grant(ledger, args.user_id, args.amount, args.reason)
        elif args.command == "reveals":
            await show_reveals(ledger, args.user_id)
    except LeadvaultError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        return 1
    return 0


def main():
    """Main entry point."""
    args = build_parser().parse_args()
    sys.exit(asyncio.run(run(args, get_container().ledger)))


if __name__ == "__main__":
    main()
