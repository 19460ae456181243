"""Code Engine V2 API data models."""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from code_engine_sdk.core.exceptions import CodeEngineDecodeError


class ApiModel(BaseModel):
    """Base for resources decoded from API responses.

    Unknown members are ignored so that additions on the server side do not
    break older clients.
    """

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_api_response(cls, data: Any) -> Self:
        """Create from an API response body.

        Raises:
            CodeEngineDecodeError: If ``data`` does not have the model's shape.
        """
        if not isinstance(data, dict):
            raise CodeEngineDecodeError(
                f"Expected a JSON object for {cls.__name__}",
                details=type(data).__name__,
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise CodeEngineDecodeError(
                f"Response does not match {cls.__name__}",
                details=str(e),
            ) from e


class PaginationListNextMetadata(ApiModel):
    """Pointer to the next page of a list."""

    href: str | None = None
    start: str | None = None


class Project(ApiModel):
    """Code Engine project."""

    account_id: str | None = None
    created: str | None = Field(default=None, description="Creation timestamp")
    crn: str | None = None
    details: str | None = None
    id: str | None = Field(default=None, description="Project GUID")
    name: str | None = None
    reason: str | None = None
    region: str | None = None
    resource_group_id: str | None = None
    status: str | None = Field(default=None, description="e.g. creating, active")
    type: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class ProjectList(ApiModel):
    """Page of projects."""

    limit: int | None = None
    next: PaginationListNextMetadata | None = None
    projects: list[Project] = Field(default_factory=list)


class ConfigMap(ApiModel):
    """Configmap of a project."""

    created: str | None = None
    data: dict[str, str] | None = None
    id: str | None = None
    immutable: bool | None = None
    name: str | None = None
    type: str | None = None


class ConfigMapList(ApiModel):
    """Page of configmaps."""

    configmaps: list[ConfigMap] = Field(default_factory=list)
    limit: int | None = None
    next: PaginationListNextMetadata | None = None


class Reclamation(ApiModel):
    """Soft-deleted project awaiting reclamation or restore."""

    account_id: str | None = None
    details: str | None = None
    id: str | None = None
    project_id: str | None = None
    reason: str | None = None
    resource_group_id: str | None = None
    status: str | None = None
    target_time: str | None = Field(default=None, description="When the project is reclaimed")
    type: str | None = None


class ReclamationList(ApiModel):
    """All reclamations of the account."""

    reclamations: list[Reclamation] = Field(default_factory=list)
