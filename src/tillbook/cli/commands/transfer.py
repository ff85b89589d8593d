"""Fund transfer commands."""

import click
from tillbook.cli.account_resolution import describe_account, resolve_account_or_exit
from tillbook.cli.error_handling import handle_domain_error
from tillbook.domain.account import AccountService
from tillbook.domain.errors import DomainError
from tillbook.domain.transfer import TransferService
from tillbook.utils.amount_parser import format_amount, parse_amount


@click.group()
def transfer_group():
    """Move funds between stores and savings accounts."""
    pass


@transfer_group.command("create")
@click.option("--from", "from_account", required=True, help="Source account as KIND:ID or KIND:CODE")
@click.option("--to", "to_account", required=True, help="Destination account as KIND:ID or KIND:CODE")
@click.option("--amount", required=True, help="Positive amount to move")
@click.option("--notes", help="Notes")
@click.option("--staff", help="Identity of the staff member requesting the transfer")
@click.pass_context
def create_transfer(
    ctx, from_account: str, to_account: str, amount: str, notes: str | None, staff: str | None
):
    """Transfer funds from one account to another.

    Examples:
        tillbook transfer create --from store:1 --to savings:1 --amount 250
        tillbook transfer create --from savings:SAV-01 --to store:ST-002 --amount 80 --notes "float"
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    service = TransferService(db, block_overdraft=ctx.obj["settings"].block_overdraft)

    source = resolve_account_or_exit(ctx, account_service, from_account)
    destination = resolve_account_or_exit(ctx, account_service, to_account)

    try:
        value = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        result = service.transfer(source, destination, value, notes=notes, staff_identity=staff)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Transfer {result.reference} completed")
    click.echo(f"  From: {describe_account(account_service, source)}")
    click.echo(f"  To: {describe_account(account_service, destination)}")
    click.echo(f"  Amount: {format_amount(result.transfer.amount)}")
    if not result.balances_synced:
        click.echo("Warning: balances were not fully updated; reconcile them manually.", err=True)


@transfer_group.command("list")
@click.pass_context
def list_transfers(ctx):
    """List transfers, newest first."""
    service = TransferService(ctx.obj["db"])

    transfers = service.list_transfers()
    if not transfers:
        click.echo("No transfers found.")
        return

    click.echo("\nTransfers:")
    click.echo("-" * 90)
    for t in transfers:
        click.echo(
            f"{t.reference} | {t.transaction_date} | {str(t.from_account):12s} -> "
            f"{str(t.to_account):12s} | {format_amount(t.amount):>12s} | {t.notes or ''}"
        )


@transfer_group.command("show")
@click.argument("reference")
@click.pass_context
def show_transfer(ctx, reference: str):
    """Show one transfer and its two legs."""
    db = ctx.obj["db"]
    service = TransferService(db)

    try:
        record = service.get_transfer(reference)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Transfer {record.reference} on {record.transaction_date}")
    click.echo(f"  Amount: {format_amount(record.amount)}")
    click.echo(f"  From: {record.from_account} (transaction {record.outgoing_transaction_id})")
    click.echo(f"  To: {record.to_account} (transaction {record.incoming_transaction_id})")
    if record.staff_identity:
        click.echo(f"  Staff: {record.staff_identity}")
    if record.notes:
        click.echo(f"  Notes: {record.notes}")


def register_commands(cli):
    """Register transfer commands with main CLI."""
    cli.add_command(transfer_group, name="transfer")
