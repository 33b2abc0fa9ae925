"""Run the REST API."""

from __future__ import annotations

import click

from cellpilot.cli.decorators import handle_errors
from cellpilot.cli.output import OutputFormatter
from cellpilot.utils.config import get_config

out = OutputFormatter()


@click.command(name="serve")
@click.option("--host", default=None, help="Bind address (default: api.host from config)")
@click.option("--port", type=int, default=None, help="Port (default: api.port from config)")
@handle_errors
def serve_cmd(host, port):
    """Serve the analysis, formula and access endpoints over HTTP.

    \b
    Examples:
        cellpilot serve
        cellpilot serve --host 127.0.0.1 --port 8080
    """
    import uvicorn

    from cellpilot.api.server import create_app

    config = get_config()
    host = host or config.get("api.host", "0.0.0.0")
    port = port or config.get("api.port", 8000)

    out.progress_start(f"Serving CellPilot API on http://{host}:{port} (docs at /docs)")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")
