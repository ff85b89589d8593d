"""CLI error handling helpers."""

import logging

import click

from tillbook.domain.errors import DependencyError, DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print ``Error: <message>`` to stderr and exit with status 1.

    Persistence failures are also logged with their cause, since the
    message alone ("Failed to create transfer record") rarely says why.
    """
    if isinstance(error, DependencyError):
        logger.error("%s (caused by %r)", error, error.__cause__)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
