"""todoapp CLI — run the API server and manage the schema.

Usage:
    todoapp serve                    # Run the API with uvicorn
    todoapp serve --port 9000 --reload
    todoapp create-schema            # Create the five tables if missing
"""

import asyncio

import click
import structlog

from todoapp.config import settings
from todoapp.log import configure_logging

logger = structlog.get_logger()


@click.group()
def cli():
    """todoapp — per-user todo lists behind a JWT-authenticated API."""
    configure_logging(settings.log_level, json=settings.log_json)


@cli.command()
@click.option("--host", default=None, help="Bind address (default: TODOAPP_HOST).")
@click.option("--port", default=None, type=int, help="Port (default: TODOAPP_PORT).")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host, port, reload):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "todoapp.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


@cli.command("create-schema")
def create_schema_cmd():
    """Create all tables in TODOAPP_DATABASE_URL."""
    from todoapp.db.engine import create_schema, engine

    async def _run():
        try:
            await create_schema(engine)
        finally:
            await engine.dispose()

    asyncio.run(_run())
    logger.info("todoapp.schema_created")
    click.echo("Schema created.")


def main():
    cli()


if __name__ == "__main__":
    main()
