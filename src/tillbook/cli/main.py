"""Main CLI entry point."""

from dataclasses import replace

import click

from tillbook.config import Settings
from tillbook.logging_config import setup_logging

# Import and register all commands at module level
from tillbook.cli.commands import (
    store,
    savings,
    add,
    transaction,
    transfer,
    balance,
    history,
    serve,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TILLBOOK_DB_PATH environment variable)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (overrides TILLBOOK_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Tillbook - point-of-sale cash bookkeeping.

    Track store cash positions and savings accounts, post income and
    expenses, move funds between accounts and take daily cash snapshots.
    """
    ctx.ensure_object(dict)

    settings = Settings.from_env()
    if db_path is not None:
        settings = replace(settings, database_path=db_path, database_url=None)
    if log_level is not None:
        settings = replace(settings, log_level=log_level.upper())
    ctx.obj["settings"] = settings

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        setup_logging(settings.log_level)
        db = settings.create_database()
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
store.register_commands(cli)
savings.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
transfer.register_commands(cli)
balance.register_commands(cli)
history.register_commands(cli)
serve.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
