import json
from typing import Optional

import typer
from rich.console import Console

from unitydap.host.extension import AttachRequest, LaunchRequest, UnityDebugExtension, compute_scenario
from unitydap.kernel.errors import ConfigError

console = Console(stderr=True)


def scenario(
    label: str = typer.Argument(..., help="Label of the debug scenario."),
    pid: Optional[int] = typer.Option(None, "--pid", help="Process id of the Unity editor to attach to."),
    launch: bool = typer.Option(False, "--launch", help="Request a launch instead of an attach."),
):
    """
    Print the debug scenario for attaching to a Unity process.
    """
    request = LaunchRequest() if launch else AttachRequest(process_id=pid)
    try:
        result = compute_scenario(UnityDebugExtension(), label, request)
    except ConfigError as exc:
        console.print(f"[red]Invalid scenario:[/red] {exc}")
        raise typer.Exit(1)

    typer.echo(json.dumps(result.to_dict(), indent=2))
