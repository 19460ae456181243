"""Status command: show the SDK version and the configuration in effect."""

from __future__ import annotations

import os
import platform
from typing import Annotated

import typer
from rich.console import Console

from code_engine_sdk import __version__
from code_engine_sdk.cli.output import Table
from code_engine_sdk.core.config import get_credentials_path
from code_engine_sdk.core.sdk_headers import get_user_agent
from code_engine_sdk.logging import get_logger

console = Console()
logger = get_logger(__name__)

ENVIRONMENT_VARIABLES = (
    "CE_API_KEY",
    "CE_API_HOST",
    "CE_PROJECT_ID",
    "CE_PROJECT_REGION",
    "CE_ACCOUNT_ID",
    "IAM_ENDPOINT",
    "RESOURCECONTROLLER_ENDPOINT",
)
SECRET_VARIABLES = frozenset({"CE_API_KEY"})


def status(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show the User-Agent and platform details."),
    ] = False,
) -> None:
    """Show the SDK version and which environment variables are set."""
    logger.debug("Collecting status", verbose=verbose)

    table = Table(title="Code Engine SDK Status")
    table.add_column("Component", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_column("Details", style="dim")

    table.add_row("SDK Version", __version__, "code-engine-sdk")
    table.add_row("Python", platform.python_version(), platform.python_implementation())
    table.add_row("Platform", platform.system(), platform.release())
    if verbose:
        table.add_row("User-Agent", get_user_agent(), "")

    for name in ENVIRONMENT_VARIABLES:
        value = os.environ.get(name)
        if not value:
            table.add_row(name, "[yellow]unset[/yellow]", "")
        elif name in SECRET_VARIABLES:
            table.add_row(name, "set", "hidden")
        else:
            table.add_row(name, value, "")

    console.print(table)

    credentials = get_credentials_path()
    if credentials.exists():
        console.print(f"\n[green]Credentials file found:[/green] {credentials}")
    else:
        console.print(f"\n[yellow]No credentials file at[/yellow] {credentials}")
