import typer

from unitydap.adapters.http import fastapi_server
from unitydap.internal.constants import RUNTIME_HOST, RUNTIME_PORT


def serve(
    host: str = typer.Option(RUNTIME_HOST, help="Host to bind the server to."),
    port: int = typer.Option(RUNTIME_PORT, help="Port to bind the server to."),
):
    """
    Serve scenario and binary resolution over HTTP.
    """
    fastapi_server.main(host=host, port=port)
