import importlib.metadata

import typer

from unitydap.internal.logging import get_logger

logger = get_logger(__name__)


def version():
    """
    Show the unitydap version.
    """
    try:
        package_version = importlib.metadata.version("unitydap")
    except importlib.metadata.PackageNotFoundError:
        typer.echo("unitydap is not installed or version metadata not found.")
        typer.echo("Please install the package first (e.g., pip install . or pip install -e .)")
        logger.warning("unitydap package version not found.")
        raise typer.Exit(1)

    typer.echo(f"unitydap version: {package_version}")
