"""Main CLI entry point using Typer."""

from __future__ import annotations

import typer
from rich.console import Console

from code_engine_sdk import __version__
from code_engine_sdk.cli.commands import kubeconfig, projects, status
from code_engine_sdk.logging.config import configure_logging

app = typer.Typer(
    name="code-engine",
    help="Drive the IBM Cloud Code Engine APIs from the command line.",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"code-engine version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr."),
    debug: bool = typer.Option(False, "--debug", help="Log requests and responses."),
) -> None:
    """Code Engine SDK drivers."""
    configure_logging(verbose=verbose, debug=debug)


app.command()(kubeconfig.kubeconfig)
app.command()(projects.projects)
app.command()(status.status)


if __name__ == "__main__":
    app()
