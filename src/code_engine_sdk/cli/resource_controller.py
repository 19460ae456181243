"""Default resource group lookup against the IBM Cloud resource controller."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, Field, ValidationError

from code_engine_sdk.core.exceptions import (
    CodeEngineAPIError,
    CodeEngineConfigError,
    CodeEngineConnectionError,
    CodeEngineDecodeError,
    CodeEngineTimeoutError,
)
from code_engine_sdk.logging import get_logger

logger = get_logger(__name__)

DEFAULT_RESOURCE_CONTROLLER_URL = "https://resource-controller.cloud.ibm.com"


class ResourceGroup(BaseModel):
    id: str
    name: str | None = None
    default: bool = False


class ResourceGroupList(BaseModel):
    resources: list[ResourceGroup] = Field(default_factory=list)


def get_default_resource_group_id(
    access_token: str,
    account_id: str,
    endpoint: str = DEFAULT_RESOURCE_CONTROLLER_URL,
    *,
    timeout: float = 30.0,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Return the id of the account's default resource group.

    Args:
        access_token: IAM access token, sent as bearer credentials.
        account_id: IBM Cloud account id.
        endpoint: Resource controller base URL.
        timeout: Request deadline in seconds.
        transport: httpx transport override, used by tests.

    Raises:
        CodeEngineAPIError: On a non-2xx answer.
        CodeEngineDecodeError: If the answer is not a resource group list.
        CodeEngineConfigError: If the account has no default resource group.
    """
    url = f"{endpoint.rstrip('/')}/v2/resource_groups"
    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            response = client.get(
                url,
                params={"account_id": account_id, "default": "true"},
                headers={
                    "Accept": "application/json",
                    "Authorization": f"Bearer {access_token}",
                },
            )
    except httpx.TimeoutException as e:
        raise CodeEngineTimeoutError("Resource group request exceeded its deadline") from e
    except httpx.TransportError as e:
        raise CodeEngineConnectionError(f"Failed to connect to {endpoint}: {e}") from e

    if not response.is_success:
        raise CodeEngineAPIError(
            "Failed to list resource groups",
            status_code=response.status_code,
            details=response.text,
            transaction_id=response.headers.get("Transaction-Id"),
        )

    try:
        groups = ResourceGroupList.model_validate_json(response.content)
    except ValidationError as e:
        raise CodeEngineDecodeError("Unexpected resource group payload", details=str(e)) from e

    for group in groups.resources:
        if group.default:
            logger.info("Identified default resource group", name=group.name, id=group.id)
            return group.id
    raise CodeEngineConfigError(
        "No default resource group found",
        details=f"account {account_id}",
    )
