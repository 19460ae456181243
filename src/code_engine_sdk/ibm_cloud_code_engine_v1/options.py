"""Options of the IbmCloudCodeEngineV1 operations."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from code_engine_sdk.core.options import OperationOptions


class ListKubeconfigOptions(OperationOptions):
    """The ListKubeconfig options."""

    required_fields: ClassVar[tuple[str, ...]] = ("refresh_token", "id")

    refresh_token: str | None = Field(
        default=None, description="The IAM refresh token associated with the IBM Cloud account"
    )
    id: str | None = Field(default=None, description="The id of the Code Engine project")
    accept: str | None = Field(
        default=None,
        description="Response type, text/plain or application/json; a charset may be appended",
    )


class GetKubeconfigOptions(OperationOptions):
    """The GetKubeconfig options."""

    required_fields: ClassVar[tuple[str, ...]] = ("x_delegated_refresh_token", "id")

    x_delegated_refresh_token: str | None = Field(
        default=None,
        description="IAM delegated refresh token issued for the 'ce' receiver",
    )
    id: str | None = Field(default=None, description="The id of the Code Engine project")
    accept: str | None = Field(
        default=None,
        description="Response type, text/plain or application/json; a charset may be appended",
    )
