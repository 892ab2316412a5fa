import typer

from unitydap.cli.commands import (
    binary,
    doctor,
    installs,
    processes,
    resolve,
    scenario,
    serve,
    version,
)
from unitydap.internal import paths
from unitydap.internal.logging import setup_logging

cli_app = typer.Typer(
    name="unitydap",
    help="Resolve, provision and launch the Unity debug adapter.",
    no_args_is_help=True,
)


@cli_app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Also log to the console."),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level for unitydap itself."),
):
    setup_logging(log_level_name=log_level, log_file_path=paths.get_log_file(), console_output=verbose)


cli_app.command("resolve")(resolve.resolve)
cli_app.command("binary")(binary.binary)
cli_app.command("scenario")(scenario.scenario)
cli_app.command("installs")(installs.installs)
cli_app.command("processes")(processes.processes)
cli_app.command("doctor")(doctor.doctor)
cli_app.command("serve")(serve.serve)
cli_app.command("version")(version.version)

if __name__ == "__main__":
    cli_app()
