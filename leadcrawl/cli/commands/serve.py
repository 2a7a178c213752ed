"""Serve command running the REST API with uvicorn."""

import typer
import uvicorn


def serve_command(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Run the leadcrawl API server."""
    uvicorn.run("leadcrawl.api.app:app", host=host, port=port)
