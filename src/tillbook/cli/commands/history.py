"""Daily cash history commands."""

from datetime import date as date_type

import click
from tillbook.cli.account_resolution import resolve_account_or_exit
from tillbook.cli.error_handling import handle_domain_error
from tillbook.domain.account import AccountService
from tillbook.domain.entities import DailyHistoryRecord
from tillbook.domain.errors import DomainError
from tillbook.domain.snapshot import SnapshotService
from tillbook.utils.amount_parser import format_amount
from tillbook.utils.date_parser import parse_date


@click.group()
def history_group():
    """Take and view daily cash snapshots."""
    pass


def _snapshot_date(ctx, value: str | None) -> date_type:
    if value is None:
        return date_type.today()
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def _echo_record(record: DailyHistoryRecord) -> None:
    click.echo(
        f"{record.date} | {str(record.account):12s} | "
        f"open {format_amount(record.opening_balance):>12s} | "
        f"in {format_amount(record.total_income):>11s} | "
        f"out {format_amount(record.total_expense):>11s} | "
        f"xfer {format_amount(record.total_transfer):>11s} | "
        f"close {format_amount(record.closing_balance):>12s}"
    )


@history_group.command("snapshot")
@click.option("--account", required=True, help="Account as KIND:ID or KIND:CODE")
@click.option("--date", help="Date to snapshot (YYYY-MM-DD or relative like 'yesterday'); defaults to today")
@click.pass_context
def snapshot(ctx, account: str, date: str | None):
    """Recompute the cash history record of one account for one day.

    Examples:
        tillbook history snapshot --account store:1
        tillbook history snapshot --account savings:SAV-01 --date yesterday
    """
    db = ctx.obj["db"]
    ref = resolve_account_or_exit(ctx, AccountService(db), account)
    on_date = _snapshot_date(ctx, date)

    try:
        record = SnapshotService(db).compute_snapshot(ref, on_date)
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_record(record)


@history_group.command("snapshot-all")
@click.option("--date", help="Date to snapshot; defaults to today")
@click.pass_context
def snapshot_all(ctx, date: str | None):
    """Recompute the cash history record of every active store."""
    on_date = _snapshot_date(ctx, date)

    try:
        records = SnapshotService(ctx.obj["db"]).snapshot_all_active_stores(on_date)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {len(records)} snapshot(s) for {on_date}")
    for record in records:
        _echo_record(record)


@history_group.command("list")
@click.option("--account", help="Only this account (KIND:ID or KIND:CODE)")
@click.option("--date", help="Only this date")
@click.pass_context
def list_history(ctx, account: str | None, date: str | None):
    """List stored cash history records, newest first."""
    db = ctx.obj["db"]
    ref = resolve_account_or_exit(ctx, AccountService(db), account) if account else None
    on_date = _snapshot_date(ctx, date) if date else None

    records = SnapshotService(db).list_history(account=ref, on_date=on_date)
    if not records:
        click.echo("No history records found.")
        return

    for record in records:
        _echo_record(record)


def register_commands(cli):
    """Register history commands with main CLI."""
    cli.add_command(history_group, name="history")
