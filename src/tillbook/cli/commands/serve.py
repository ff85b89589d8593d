"""HTTP API server command."""

import click
import uvicorn


@click.command("serve")
@click.option("--host", help="Bind address (overrides TILLBOOK_API_HOST)")
@click.option("--port", type=int, help="Bind port (overrides TILLBOOK_API_PORT)")
@click.pass_context
def serve(ctx, host: str | None, port: int | None):
    """Run the HTTP API."""
    from tillbook.api.app import create_app

    settings = ctx.obj["settings"]
    app = create_app(db=ctx.obj["db"], settings=settings)
    uvicorn.run(
        app,
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level=settings.log_level.lower(),
    )


def register_commands(cli):
    """Register serve command with main CLI."""
    cli.add_command(serve)
