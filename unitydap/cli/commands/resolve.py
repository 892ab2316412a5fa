from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from unitydap.host.extension import default_resolver
from unitydap.internal.logging import get_logger
from unitydap.kernel.errors import UnityDapError

console = Console(stderr=True)
logger = get_logger(__name__)


def resolve(
    work_dir: Optional[Path] = typer.Option(None, "--work-dir", help="Directory holding adapter versions."),
):
    """
    Resolve the unity-debug-adapter executable, downloading it if needed.
    """
    resolver = default_resolver(work_dir.absolute() if work_dir else None)
    try:
        path = resolver.resolve()
    except UnityDapError as exc:
        console.print(f"[red]Resolution failed:[/red] {exc}")
        raise typer.Exit(1)

    typer.echo(path)
