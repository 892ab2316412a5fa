import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from unitydap.host.extension import UnityDebugExtension, default_resolver, resolve_binary
from unitydap.internal.constants import DEBUG_ADAPTER_NAME
from unitydap.kernel.errors import UnityDapError

console = Console(stderr=True)


def binary(
    config: str = typer.Option(..., "--config", help="Debug task configuration, as JSON text or @file."),
    workspace_root: Path = typer.Option(Path("."), "--workspace-root", help="Root of the Unity project."),
    adapter_path: Optional[str] = typer.Option(None, "--adapter-path", help="Use this adapter instead of resolving one."),
    adapter_name: str = typer.Option(DEBUG_ADAPTER_NAME, "--adapter", help="Debug adapter name."),
    work_dir: Optional[Path] = typer.Option(None, "--work-dir", help="Directory holding adapter versions."),
):
    """
    Print the launch descriptor a host needs to start a debug session.
    """
    if config.startswith("@"):
        config_file = Path(config[1:])
        if not config_file.is_file():
            console.print(f"[red]Config file not found:[/red] {config_file}")
            raise typer.Exit(1)
        config = config_file.read_text(encoding="utf-8")

    extension = UnityDebugExtension(default_resolver(work_dir.absolute() if work_dir else None))
    try:
        descriptor = resolve_binary(
            extension,
            adapter_name,
            config,
            adapter_path,
            str(workspace_root.absolute()),
        )
    except UnityDapError as exc:
        console.print(f"[red]Cannot start debug session:[/red] {exc}")
        raise typer.Exit(1)

    typer.echo(json.dumps(descriptor.to_dict(), indent=2))
