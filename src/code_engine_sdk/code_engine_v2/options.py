"""Options of the CodeEngineV2 operations.

Every operation authenticates with an IAM refresh token, sent as the
``Refresh-Token`` header.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from code_engine_sdk.core.options import OperationOptions


class _RefreshTokenOptions(OperationOptions):
    required_fields: ClassVar[tuple[str, ...]] = ("refresh_token",)

    refresh_token: str | None = Field(default=None, description="IAM refresh token")


class _ProjectOptions(_RefreshTokenOptions):
    required_fields: ClassVar[tuple[str, ...]] = ("refresh_token", "project_guid")

    project_guid: str | None = Field(default=None, description="Project GUID")


class _ConfigmapOptions(_ProjectOptions):
    required_fields: ClassVar[tuple[str, ...]] = ("refresh_token", "project_guid", "configmap_name")

    configmap_name: str | None = Field(default=None, description="Configmap name")


class _PageOptions(OperationOptions):
    limit: int | None = Field(default=None, ge=1, description="Maximum number of items per page")
    start: str | None = Field(default=None, description="Page token taken from next.start")


class ListProjectsOptions(_PageOptions, _RefreshTokenOptions):
    """The ListProjectsV2 options."""


class CreateProjectOptions(_RefreshTokenOptions):
    """The CreateProjectV2 options."""

    name: str | None = Field(default=None, description="Project name")
    region: str | None = Field(default=None, description="Region id, e.g. us-south or eu-de")
    resource_group_id: str | None = Field(default=None, description="Resource group id")
    tags: list[str] | None = Field(default=None, description="Resource instance tags")


class GetProjectOptions(_ProjectOptions):
    """The GetProjectV2 options."""


class DeleteProjectOptions(_ProjectOptions):
    """The DeleteProjectV2 options."""


class ListConfigmapsOptions(_PageOptions, _ProjectOptions):
    """The ListConfigmapsV2 options."""


class CreateConfigmapOptions(_ProjectOptions):
    """The CreateConfigmapV2 options."""

    created: str | None = None
    data: dict[str, str] | None = None
    id: str | None = None
    immutable: bool | None = None
    name: str | None = None


class GetConfigmapOptions(_ConfigmapOptions):
    """The GetConfigmapV2 options."""


class UpdateConfigmapOptions(_ConfigmapOptions):
    """The UpdateConfigmapV2 options."""

    created: str | None = None
    data: dict[str, str] | None = None
    id: str | None = None
    immutable: bool | None = None
    name: str | None = None


class DeleteConfigmapOptions(_ConfigmapOptions):
    """The DeleteConfigmapV2 options."""


class ListReclamationsOptions(_RefreshTokenOptions):
    """The ListReclamationsV2 options."""


class GetReclamationOptions(_ProjectOptions):
    """The GetReclamationV2 options."""


class ReclaimReclamationOptions(_ProjectOptions):
    """The ReclaimReclamationV2 options."""


class RestoreReclamationOptions(_ProjectOptions):
    """The RestoreReclamationV2 options."""
