"""CLI helpers for account resolution and error handling."""

from __future__ import annotations

import click
from tillbook.domain.account import AccountService
from tillbook.domain.entities import AccountRef
from tillbook.domain.errors import DomainError
from tillbook.cli.error_handling import handle_domain_error
from tillbook.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str
) -> AccountRef:
    """Resolve a KIND:ID or KIND:CODE specifier, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def describe_account(account_service: AccountService, ref: AccountRef) -> str:
    """Return 'Store 3 (Downtown)' style text for output lines."""
    account = account_service.get_account(ref)
    if account is None:
        return f"{ref.label} {ref.id}"
    return f"{ref.label} {ref.id} ({account.display_name})"
