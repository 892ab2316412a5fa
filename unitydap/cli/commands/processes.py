import typer
from rich.console import Console
from rich.table import Table

from unitydap.runtime import system

console = Console()


def processes():
    """
    List running Unity editors and the debugger port of each.
    """
    found = system.find_unity_processes()
    if not found:
        console.print("[yellow]No running Unity processes found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Unity processes")
    table.add_column("PID", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Debugger port", justify="right", style="green")
    for proc in found:
        table.add_row(str(proc.pid), proc.name, str(proc.debugger_port))
    console.print(table)
