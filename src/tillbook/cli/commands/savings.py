"""Savings account management commands."""

import click
from tillbook.cli.account_resolution import resolve_account_or_exit
from tillbook.cli.error_handling import handle_domain_error
from tillbook.domain.account import AccountService
from tillbook.domain.balance import BalanceLedger
from tillbook.domain.entities import AccountStatus
from tillbook.domain.errors import DomainError
from tillbook.utils.amount_parser import format_amount, parse_amount

STATUS_CHOICE = click.Choice([s.value for s in AccountStatus])


@click.group()
def savings_group():
    """Manage savings accounts."""
    pass


@savings_group.command("create")
@click.argument("code", metavar="ACCOUNT_CODE")
@click.option("--name", required=True, help="Account name")
@click.option("--type", "account_type", required=True, help="Account type (e.g. 'fixed', 'current')")
@click.option("--bank", help="Bank name")
@click.option("--number", "account_number", help="Bank account number")
@click.option("--opening-balance", default="0", show_default=True, help="Opening balance")
@click.option("--notes", help="Notes")
@click.pass_context
def create_savings_account(
    ctx,
    code: str,
    name: str,
    account_type: str,
    bank: str | None,
    account_number: str | None,
    opening_balance: str,
    notes: str | None,
):
    """Create a new savings account.

    Examples:
        tillbook savings create SAV-01 --name "Reserve" --type fixed
        tillbook savings create SAV-02 --name "Payroll" --type current --bank "City Bank" --opening-balance 500
    """
    service = AccountService(ctx.obj["db"])

    try:
        balance = parse_amount(opening_balance)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        account_id = service.create_savings_account(
            code=code,
            name=name,
            account_type=account_type,
            bank_name=bank,
            account_number=account_number,
            opening_balance=balance,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created savings account '{name}' (ID: {account_id})")
    if balance:
        click.echo(f"Opening balance set to {format_amount(balance)}")


@savings_group.command("list")
@click.option("--status", type=STATUS_CHOICE, help="Only show accounts with this status")
@click.pass_context
def list_savings_accounts(ctx, status: str | None):
    """List savings accounts with their current balance."""
    db = ctx.obj["db"]
    service = AccountService(db)
    ledger = BalanceLedger(db)

    accounts = service.list_savings_accounts(status=AccountStatus(status) if status else None)
    if not accounts:
        click.echo("No savings accounts found.")
        return

    click.echo("\nSavings accounts:")
    click.echo("-" * 80)
    for acc in accounts:
        balance = format_amount(ledger.current_balance(acc.ref))
        click.echo(
            f"ID: {acc.id:3d} | {acc.code:10s} | {acc.name:20s} | {acc.status.value:8s} | {balance:>14s}"
        )


@savings_group.command("status")
@click.argument("account", metavar="ACCOUNT")
@click.argument("status", type=STATUS_CHOICE)
@click.pass_context
def set_savings_status(ctx, account: str, status: str) -> None:
    """Change the status of a savings account.

    ACCOUNT can be an account ID or code.
    """
    service = AccountService(ctx.obj["db"])
    ref = resolve_account_or_exit(ctx, service, f"savings:{account}")

    try:
        service.set_status(ref, AccountStatus(status))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Savings account {ref.id} is now {status}")


def register_commands(cli):
    """Register savings account commands with main CLI."""
    cli.add_command(savings_group, name="savings")
