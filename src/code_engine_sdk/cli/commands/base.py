"""Shared options and error handling for the CLI commands."""

from __future__ import annotations

from typing import Annotated, NoReturn

import typer
from rich.console import Console

from code_engine_sdk.core.authenticators import DEFAULT_IAM_URL
from code_engine_sdk.core.exceptions import (
    CodeEngineAPIError,
    CodeEngineAuthError,
    CodeEngineConfigError,
    CodeEngineConnectionError,
    CodeEngineError,
    CodeEngineTimeoutError,
    CodeEngineValidationError,
)

console = Console()

# IAM client credentials used by the IBM Cloud CLI.
CLI_CLIENT_ID = "bx"
CLI_CLIENT_SECRET = "bx"

ApiKeyOption = Annotated[
    str,
    typer.Option(
        "--apikey",
        envvar="CE_API_KEY",
        help="IBM Cloud API key",
        show_default=False,
    ),
]

ApiHostOption = Annotated[
    str | None,
    typer.Option(
        "--api-host",
        envvar="CE_API_HOST",
        help="Code Engine API host, e.g. api.eu-de.codeengine.cloud.ibm.com",
    ),
]

IamEndpointOption = Annotated[
    str,
    typer.Option(
        "--iam-endpoint",
        envvar="IAM_ENDPOINT",
        help="IAM identity service base URL",
    ),
]

DEFAULT_IAM_ENDPOINT = DEFAULT_IAM_URL


def handle_code_engine_error(error: CodeEngineError) -> NoReturn:
    """Print ``error`` for a human and exit.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, CodeEngineTimeoutError):
        console.print("[red]Error:[/red] Request timed out")
        console.print(f"  {error.message}")
    elif isinstance(error, CodeEngineConnectionError):
        console.print("[red]Error:[/red] Cannot reach the service")
        console.print(f"  {error.message}")
        console.print("\n[dim]Hint: Check the API host and your network connection.[/dim]")
    elif isinstance(error, CodeEngineAuthError):
        console.print("[red]Error:[/red] Authentication/authorization failed")
        console.print(f"  {error}")
        console.print("\n[dim]Hint: Check that CE_API_KEY is valid for this account.[/dim]")
    elif isinstance(error, CodeEngineAPIError):
        console.print("[red]Error:[/red] Request failed")
        console.print(f"  {error}")
    elif isinstance(error, CodeEngineValidationError | CodeEngineConfigError):
        console.print("[red]Error:[/red] Invalid input")
        console.print(f"  {error.message}")
    else:
        console.print(f"[red]Error:[/red] {error.message}")

    if error.details and not isinstance(error, CodeEngineAPIError):
        console.print(f"  Details: {error.details}")
    raise typer.Exit(1)
