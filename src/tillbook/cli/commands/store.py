"""Store management commands."""

import click
from tillbook.cli.account_resolution import resolve_account_or_exit
from tillbook.cli.error_handling import handle_domain_error
from tillbook.domain.account import AccountService
from tillbook.domain.entities import AccountStatus
from tillbook.domain.errors import DomainError

STATUS_CHOICE = click.Choice([s.value for s in AccountStatus])


@click.group()
def store_group():
    """Manage stores."""
    pass


@store_group.command("create")
@click.argument("code", metavar="STORE_CODE")
@click.option("--branch", required=True, help="Branch name")
@click.option("--address", required=True, help="Store address")
@click.option("--phone", help="Contact phone number")
@click.option("--email", help="Contact email")
@click.option("--status", type=STATUS_CHOICE, default="active", show_default=True)
@click.pass_context
def create_store(
    ctx, code: str, branch: str, address: str, phone: str | None, email: str | None, status: str
):
    """Create a new store.

    Examples:
        tillbook store create ST-001 --branch Downtown --address "1 Main St"
        tillbook store create ST-002 --branch Airport --address "Terminal 2" --status inactive
    """
    service = AccountService(ctx.obj["db"])

    try:
        store_id = service.create_store(
            code=code,
            branch=branch,
            address=address,
            phone=phone,
            email=email,
            status=AccountStatus(status),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created store '{branch}' (ID: {store_id})")


@store_group.command("list")
@click.option("--status", type=STATUS_CHOICE, help="Only show stores with this status")
@click.pass_context
def list_stores(ctx, status: str | None):
    """List stores."""
    service = AccountService(ctx.obj["db"])

    stores = service.list_stores(status=AccountStatus(status) if status else None)
    if not stores:
        click.echo("No stores found.")
        return

    click.echo("\nStores:")
    click.echo("-" * 70)
    for s in stores:
        click.echo(f"ID: {s.id:3d} | {s.code:10s} | {s.branch:20s} | {s.status.value}")


@store_group.command("status")
@click.argument("store", metavar="STORE")
@click.argument("status", type=STATUS_CHOICE)
@click.pass_context
def set_store_status(ctx, store: str, status: str) -> None:
    """Change the status of a store.

    STORE can be a store ID or code. Only active stores accept new
    transactions and transfers.

    Examples:
        tillbook store status 1 stopped
        tillbook store status ST-001 active
    """
    service = AccountService(ctx.obj["db"])
    ref = resolve_account_or_exit(ctx, service, f"store:{store}")

    try:
        service.set_status(ref, AccountStatus(status))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Store {ref.id} is now {status}")


def register_commands(cli):
    """Register store commands with main CLI."""
    cli.add_command(store_group, name="store")
