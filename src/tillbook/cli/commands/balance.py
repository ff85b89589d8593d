"""Cash balance commands."""

import click
from tillbook.cli.account_resolution import describe_account, resolve_account_or_exit
from tillbook.cli.error_handling import handle_domain_error
from tillbook.domain.account import AccountService
from tillbook.domain.balance import ADJUSTMENT, BalanceLedger
from tillbook.domain.entities import TransactionKind
from tillbook.domain.errors import DomainError
from tillbook.utils.amount_parser import format_amount, parse_amount

POSTING_CHOICE = click.Choice([k.value for k in TransactionKind] + [ADJUSTMENT])


@click.group()
def balance_group():
    """View and adjust cash balances."""
    pass


@balance_group.command("show")
@click.option("--account", help="Only this account (KIND:ID or KIND:CODE)")
@click.pass_context
def show_balances(ctx, account: str | None):
    """Show current balances."""
    db = ctx.obj["db"]
    account_service = AccountService(db)
    ledger = BalanceLedger(db)

    if account:
        ref = resolve_account_or_exit(ctx, account_service, account)
        click.echo(f"{describe_account(account_service, ref)}: {format_amount(ledger.current_balance(ref))}")
        return

    entries = ledger.list_balances()
    if not entries:
        click.echo("No balances recorded yet.")
        return

    click.echo("\nBalances:")
    click.echo("-" * 70)
    for entry in entries:
        label = describe_account(account_service, entry.account)
        click.echo(f"{label:40s} {format_amount(entry.current_balance):>14s}  ({entry.last_updated:%Y-%m-%d %H:%M})")


@balance_group.command("adjust")
@click.option("--account", required=True, help="Account as KIND:ID or KIND:CODE")
@click.option("--kind", required=True, type=POSTING_CHOICE, help="'adjustment' overwrites the balance")
@click.option("--amount", required=True, help="Amount of the posting")
@click.pass_context
def adjust_balance(ctx, account: str, kind: str, amount: str):
    """Post a manual change to a cash balance.

    No transaction is recorded; use 'tillbook add' for regular postings.

    Examples:
        tillbook balance adjust --account store:1 --kind income --amount 50
        tillbook balance adjust --account store:1 --kind adjustment --amount 1200
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    ref = resolve_account_or_exit(ctx, account_service, account)

    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        entry = BalanceLedger(db).post_adjustment(ref, kind, value)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{describe_account(account_service, ref)}: {format_amount(entry.current_balance)}")


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(balance_group, name="balance")
