from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from unitydap.adapters.storage_fs import FileSystemInventory
from unitydap.internal import paths
from unitydap.kernel.artifacts import Candidate, version_of
from unitydap.kernel.errors import FilesystemError
from unitydap.kernel.ranking import ordering_from_env, rank

console = Console()


def installs(
    work_dir: Optional[Path] = typer.Option(None, "--work-dir", help="Directory holding adapter versions."),
):
    """
    List provisioned adapter versions, in the order they would be tried.
    """
    root = work_dir.absolute() if work_dir else paths.get_work_dir()
    try:
        found = FileSystemInventory(root).list_installs()
    except FilesystemError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    if not found:
        console.print(f"[yellow]No adapter versions found in {root}.[/yellow]")
        return

    table = Table(title=f"Adapter versions in {root}")
    table.add_column("Directory", style="cyan", no_wrap=True)
    table.add_column("Version")
    table.add_column("Executable", justify="center")

    ranked = rank(None, [Candidate.from_install(i) for i in found], ordering=ordering_from_env())
    for candidate in ranked:
        present = paths.binary_path_in(root / candidate.directory_name).is_file()
        table.add_row(
            candidate.directory_name,
            version_of(candidate.directory_name),
            "[green]yes[/green]" if present else "[red]missing[/red]",
        )
    console.print(table)
