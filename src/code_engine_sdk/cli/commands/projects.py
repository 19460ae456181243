"""Projects command: exercise the project lifecycle of the V2 API."""

from __future__ import annotations

import time
from datetime import datetime
from typing import Annotated, TypeVar

import typer

from code_engine_sdk.cli.commands.base import (
    CLI_CLIENT_ID,
    CLI_CLIENT_SECRET,
    DEFAULT_IAM_ENDPOINT,
    ApiKeyOption,
    IamEndpointOption,
    console,
    handle_code_engine_error,
)
from code_engine_sdk.cli.output import projects_table
from code_engine_sdk.cli.resource_controller import (
    DEFAULT_RESOURCE_CONTROLLER_URL,
    get_default_resource_group_id,
)
from code_engine_sdk.code_engine_v2 import CodeEngineV2, Project
from code_engine_sdk.core.authenticators import IamAuthenticator
from code_engine_sdk.core.detailed_response import DetailedResponse
from code_engine_sdk.core.exceptions import (
    CodeEngineAPIError,
    CodeEngineDecodeError,
    CodeEngineError,
)
from code_engine_sdk.logging import get_logger

logger = get_logger(__name__)

PROJECT_NAME_PREFIX = "project-sdk-go-e2e--crud--"
DEFAULT_REGION = "eu-de"

T = TypeVar("T")


def _require_result(response: DetailedResponse[T], operation: str) -> T:
    result = response.get_result()
    if result is None:
        raise CodeEngineDecodeError(f"{operation} returned no body")
    return result


def wait_for_active(
    service: CodeEngineV2,
    refresh_token: str,
    project_guid: str,
    attempts: int = 20,
    interval: float = 10.0,
) -> Project | None:
    """Poll a project until its status is ``active``.

    Sleeps ``interval`` seconds before each of at most ``attempts`` reads.

    Returns:
        The last project read, or None if ``attempts`` is 0.
    """
    project = None
    for _ in range(attempts):
        time.sleep(interval)
        project = _require_result(
            service.get_project(service.new_get_project_options(refresh_token, project_guid)),
            "get_project",
        )
        console.print(
            f"Obtained status of project '{project.name}' (guid: '{project.id}'): {project.status}."
        )
        if project.is_active:
            break
    return project


def projects(
    apikey: ApiKeyOption,
    api_host: Annotated[
        str,
        typer.Option("--api-host", envvar="CE_API_HOST", help="Code Engine API host"),
    ],
    account_id: Annotated[
        str,
        typer.Option("--account-id", envvar="CE_ACCOUNT_ID", help="IBM Cloud account id"),
    ],
    iam_endpoint: IamEndpointOption = DEFAULT_IAM_ENDPOINT,
    resource_controller_endpoint: Annotated[
        str,
        typer.Option(
            "--resource-controller-endpoint",
            envvar="RESOURCECONTROLLER_ENDPOINT",
            help="Resource controller base URL",
        ),
    ] = DEFAULT_RESOURCE_CONTROLLER_URL,
    region: Annotated[
        str, typer.Option("--region", help="Region of the created project")
    ] = DEFAULT_REGION,
    poll_attempts: Annotated[
        int, typer.Option("--poll-attempts", min=0, help="Status reads before deleting")
    ] = 20,
    poll_interval: Annotated[
        float, typer.Option("--poll-interval", min=0.0, help="Seconds between status reads")
    ] = 10.0,
) -> None:
    """List, create, await and delete a Code Engine project."""
    try:
        authenticator = IamAuthenticator(
            apikey,
            url=iam_endpoint,
            client_id=CLI_CLIENT_ID,
            client_secret=CLI_CLIENT_SECRET,
        )
        access_token = authenticator.get_token()
        refresh_token = authenticator.refresh_token or ""

        resource_group_id = get_default_resource_group_id(
            access_token, account_id, resource_controller_endpoint
        )
        console.print(f"Resolved {resource_group_id} as default resource group id.")

        with CodeEngineV2(authenticator, service_url=f"https://{api_host}/v2") as service:
            listed = service.list_projects(service.new_list_projects_options(refresh_token))
            found = _require_result(listed, "list_projects")
            console.print(projects_table(found.projects))
            console.print(f"Found {len(found.projects)} projects.")

            name = PROJECT_NAME_PREFIX + datetime.now().strftime("%y%m%d-%H%M%S")
            created = _require_result(
                service.create_project(
                    service.new_create_project_options(
                        refresh_token,
                        name=name,
                        region=region,
                        resource_group_id=resource_group_id,
                    )
                ),
                "create_project",
            )
            if not created.id:
                raise CodeEngineDecodeError(
                    "Created project has no id", details=f"name {created.name!r}"
                )
            console.print(f"Created project '{created.name}' (guid: '{created.id}').")

            wait_for_active(service, refresh_token, created.id, poll_attempts, poll_interval)

            try:
                deleted = service.delete_project(
                    service.new_delete_project_options(refresh_token, created.id)
                )
            except CodeEngineAPIError as e:
                console.print(f"Delete failed (transaction-id: '{e.transaction_id}')")
                raise
            console.print(f"Deleted project: '{deleted.get_status_code()}'")

            found = _require_result(
                service.list_projects(service.new_list_projects_options(refresh_token)),
                "list_projects",
            )
            console.print(f"Found {len(found.projects)} projects.")
        logger.info("Project lifecycle complete", project=name)
    except CodeEngineError as e:
        handle_code_engine_error(e)
