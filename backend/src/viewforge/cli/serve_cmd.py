"""API server CLI command."""

import os

import click


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option(
    "--port",
    type=int,
    default=lambda: int(os.environ.get("VIEWFORGE_PORT", "8000")),
    help="Port to listen on (default: VIEWFORGE_PORT or 8000).",
)
@click.option("--reload", is_flag=True, default=False, help="Restart on source changes.")
def serve(host: str, port: int, reload: bool):
    """Start the ViewForge HTTP API.

    The database and metadata locations come from DATABASE_URL,
    VIEWFORGE_DB_PATH and VIEWFORGE_METADATA_PATH.
    """
    import uvicorn

    uvicorn.run(
        "viewforge.api:app",
        host=host,
        port=port,
        reload=reload,
        log_level=os.environ.get("VIEWFORGE_LOG_LEVEL", "info").lower(),
    )
