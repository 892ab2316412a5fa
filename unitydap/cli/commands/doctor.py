import os
import shutil
import sys
from pathlib import Path
from typing import Optional

import typer

from unitydap.adapters.github_releases import GitHubReleaseSource
from unitydap.adapters.storage_fs import FileSystemInventory
from unitydap.host.config import platform_default_mono
from unitydap.internal import paths
from unitydap.internal.constants import MONO_PATH_ENV
from unitydap.internal.logging import get_logger
from unitydap.kernel.errors import FilesystemError, RegistryError
from unitydap.runtime import system

logger = get_logger(__name__)


def doctor(
    work_dir: Optional[Path] = typer.Option(None, "--work-dir", help="Directory holding adapter versions."),
    offline: bool = typer.Option(False, "--offline", help="Skip the release registry check."),
):
    """
    Check that a debug session could be started.
    """
    typer.echo("Running unitydap doctor checks...\n")
    all_passed = True
    root = work_dir.absolute() if work_dir else paths.get_work_dir()

    def check(description: str, func):
        nonlocal all_passed
        typer.echo(f"- {description}...", nl=False)
        result, message = func()
        if result:
            typer.echo(f" {typer.style('PASSED', fg=typer.colors.GREEN)}")
            if message:
                typer.echo(f"  {message}")
        else:
            typer.echo(f" {typer.style('FAILED', fg=typer.colors.RED)}")
            typer.echo(f"  Reason: {message}")
            all_passed = False

    typer.echo(typer.style("System Information:", fg=typer.colors.BLUE, bold=True))
    typer.echo(f"  OS: {system.get_os_info()}")
    typer.echo(f"  Architecture: {system.get_cpu_arch()}")
    typer.echo(f"  Python Version: {sys.version.split()[0]}")
    typer.echo(f"  Work Directory: {root}")
    typer.echo("")

    def check_mono():
        mono = os.environ.get(MONO_PATH_ENV) or platform_default_mono()
        found = shutil.which(mono)
        return found is not None, found or f"'{mono}' not found; set monoPath or {MONO_PATH_ENV}."
    check("Mono runtime", check_mono)

    def check_installs():
        try:
            found = FileSystemInventory(root).list_installs()
        except FilesystemError as e:
            return False, str(e)
        usable = [i for i in found if paths.binary_path_in(root / i.directory_name).is_file()]
        if usable:
            return True, f"Found {len(usable)} usable adapter version(s)."
        return False, "No usable adapter versions on disk. Run `unitydap resolve`."
    check("Local adapter versions", check_installs)

    if not offline:
        def check_registry():
            try:
                release = GitHubReleaseSource().latest_release()
            except RegistryError as e:
                return False, str(e)
            return True, f"Latest release: {release.version}"
        check("Release registry", check_registry)

    typer.echo("\n--- Doctor Check Summary ---")
    if all_passed:
        typer.echo(typer.style("All checks PASSED!", fg=typer.colors.GREEN, bold=True))
        return

    typer.echo(typer.style("Some checks FAILED. Please review the output above.", fg=typer.colors.RED, bold=True))
    logger.warning("Doctor checks failed", work_dir=str(root))
    raise typer.Exit(1)
