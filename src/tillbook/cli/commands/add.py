"""Add transaction command."""

import click
from tillbook.cli.account_resolution import describe_account, resolve_account_or_exit
from tillbook.cli.error_handling import handle_domain_error
from tillbook.domain.account import AccountService
from tillbook.domain.balance import BalanceLedger
from tillbook.domain.entities import TransactionKind
from tillbook.domain.errors import DomainError
from tillbook.domain.transaction import TransactionService
from tillbook.utils.amount_parser import format_amount, parse_amount
from tillbook.utils.date_parser import parse_date


@click.command("add")
@click.option("--account", required=True, help="Account as KIND:ID or KIND:CODE (e.g. store:1)")
@click.option(
    "--kind",
    required=True,
    type=click.Choice([k.value for k in TransactionKind]),
    help="Transaction type",
)
@click.option("--category", required=True, help="Category (e.g. sales, rent, salary)")
@click.option("--amount", required=True, help="Positive transaction amount (e.g. 123.45)")
@click.option("--payment-method", default="cash", show_default=True, help="Payment method (e.g. cash, online)")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday'); defaults to today")
@click.option("--notes", help="Notes")
@click.option("--staff", help="Identity of the staff member posting")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    kind: str,
    category: str,
    amount: str,
    payment_method: str,
    date: str | None,
    notes: str | None,
    staff: str | None,
):
    """Post a transaction and update the account balance.

    Examples:
        tillbook add --account store:1 --kind income --category sales --amount 500
        tillbook add --account store:ST-001 --kind expense --category rent --amount 120 --date yesterday
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    transaction_service = TransactionService(db)

    ref = resolve_account_or_exit(ctx, account_service, account)

    txn_date = None
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        record = transaction_service.post_simple_transaction(
            account=ref,
            kind=kind,
            category=category,
            amount=txn_amount,
            payment_method=payment_method,
            notes=notes,
            transaction_date=txn_date,
            staff_identity=staff,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {record.id}")
    click.echo(f"  Account: {describe_account(account_service, ref)}")
    click.echo(f"  Date: {record.transaction_date}")
    click.echo(f"  {record.kind.value.capitalize()}: {format_amount(record.amount)} ({record.category})")
    click.echo(f"  Balance: {format_amount(BalanceLedger(db).current_balance(ref))}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
