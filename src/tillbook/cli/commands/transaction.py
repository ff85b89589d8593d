"""Transaction listing commands."""

import click
from tillbook.cli.account_resolution import resolve_account_or_exit
from tillbook.domain.account import AccountService
from tillbook.domain.entities import TransactionKind
from tillbook.domain.transaction import TransactionService
from tillbook.utils.amount_parser import format_amount
from tillbook.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """View transactions."""
    pass


def _parse_date_or_exit(ctx, value: str | None, label: str):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@transaction_group.command("list")
@click.option("--account", help="Account as KIND:ID or KIND:CODE")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--kind", type=click.Choice([k.value for k in TransactionKind]), help="Only this transaction type")
@click.option("--reference", help="Only transactions belonging to this transfer reference")
@click.option("--verbose", "-v", is_flag=True, help="Show payment method, staff and notes")
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    kind: str | None,
    reference: str | None,
    verbose: bool,
):
    """View transactions, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    ref = resolve_account_or_exit(ctx, AccountService(db), account) if account else None
    start = _parse_date_or_exit(ctx, start_date, "start date")
    end = _parse_date_or_exit(ctx, end_date, "end date")

    transactions = service.list_transactions(
        account=ref,
        start_date=start,
        end_date=end,
        kind=TransactionKind(kind) if kind else None,
        reference=reference,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):\n")
    for txn in transactions:
        line = (
            f"{txn.id:5d} | {txn.transaction_date} | {str(txn.account):12s} | "
            f"{txn.kind.value:8s} | {txn.category:14s} | {format_amount(txn.amount):>12s}"
        )
        if verbose:
            line += f" | {txn.payment_method} | {txn.staff_identity or '-'} | {txn.notes or ''}"
        click.echo(line)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
