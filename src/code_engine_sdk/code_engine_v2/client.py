"""CodeEngineV2: manage Code Engine projects, configmaps and reclamations."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx

from code_engine_sdk.code_engine_v2.models import (
    ConfigMap,
    ConfigMapList,
    Project,
    ProjectList,
    Reclamation,
    ReclamationList,
)
from code_engine_sdk.code_engine_v2.options import (
    CreateConfigmapOptions,
    CreateProjectOptions,
    DeleteConfigmapOptions,
    DeleteProjectOptions,
    GetConfigmapOptions,
    GetProjectOptions,
    GetReclamationOptions,
    ListConfigmapsOptions,
    ListProjectsOptions,
    ListReclamationsOptions,
    ReclaimReclamationOptions,
    RestoreReclamationOptions,
    UpdateConfigmapOptions,
)
from code_engine_sdk.core.authenticators import Authenticator
from code_engine_sdk.core.base_service import DEFAULT_TIMEOUT, BaseService
from code_engine_sdk.core.config import get_authenticator_from_environment
from code_engine_sdk.core.detailed_response import DetailedResponse
from code_engine_sdk.core.exceptions import CodeEngineValidationError
from code_engine_sdk.core.options import OperationOptions, validate_options
from code_engine_sdk.core.request_builder import DELETE, GET, PATCH, POST, RequestBuilder
from code_engine_sdk.core.sdk_headers import get_sdk_headers
from code_engine_sdk.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SERVICE_URL = "https://api.au-syd.codeengine.cloud.ibm.com/v2"
DEFAULT_SERVICE_NAME = "code_engine"
SERVICE_VERSION = "V2"
JSON_MEDIA_TYPE = "application/json"

_CONFIGMAP_BODY_FIELDS = ("created", "data", "id", "immutable", "name")


class CodeEngineV2(BaseService):
    """Client for the Code Engine V2 API.

    Each operation takes an options object carrying the caller's IAM refresh
    token and returns a :class:`DetailedResponse` whose result is a decoded
    model. Delete operations return no result.
    """

    def __init__(
        self,
        authenticator: Authenticator | None,
        service_url: str = DEFAULT_SERVICE_URL,
        *,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(service_url, authenticator, timeout=timeout, transport=transport)

    @classmethod
    def new_instance(
        cls,
        service_name: str = DEFAULT_SERVICE_NAME,
        environ: Mapping[str, str] | None = None,
        config_file: Path | str | None = None,
    ) -> CodeEngineV2:
        """Build a client from ``CODE_ENGINE_*`` variables or a credentials file."""
        authenticator = get_authenticator_from_environment(
            service_name, environ=environ, config_file=config_file
        )
        service = cls(authenticator)
        service.configure_service(service_name, environ=environ, config_file=config_file)
        return service

    @staticmethod
    def get_service_url_for_region(region: str) -> str:
        """Regional endpoints are not published for this API.

        Raises:
            CodeEngineValidationError: Always.
        """
        raise CodeEngineValidationError(
            "service does not support regional URLs",
            details=f"region {region!r}",
        )

    def _builder(
        self,
        method: str,
        path: str,
        params: Mapping[str, str | None],
        operation_id: str,
        options: OperationOptions,
        refresh_token: str | None,
        timeout: float | None,
        *,
        accept_json: bool = True,
    ) -> RequestBuilder:
        builder = self.new_request_builder(method, timeout)
        builder.resolve_request_url(self.service_url, path, params)
        builder.add_headers(get_sdk_headers(DEFAULT_SERVICE_NAME, SERVICE_VERSION, operation_id))
        if accept_json:
            builder.add_header("Accept", JSON_MEDIA_TYPE)
        builder.add_headers(options.headers)
        builder.add_header("Refresh-Token", refresh_token)
        return builder

    # Projects

    def list_projects(
        self, options: ListProjectsOptions | None, timeout: float | None = None
    ) -> DetailedResponse[ProjectList]:
        """List all projects in the account."""
        validate_options(options, "list_projects_options")
        assert options is not None
        builder = self._builder(
            GET, "/projects", {}, "ListProjectsV2", options, options.refresh_token, timeout
        )
        builder.add_query("limit", options.limit).add_query("start", options.start)
        logger.debug("Listing projects")
        response = self.send(builder.build(), "json")
        response.result = ProjectList.from_api_response(response.result)
        logger.info("Listed projects", count=len(response.result.projects))
        return response

    def create_project(
        self, options: CreateProjectOptions | None, timeout: float | None = None
    ) -> DetailedResponse[Project]:
        """Create a project; it starts in a non-active status."""
        validate_options(options, "create_project_options")
        assert options is not None
        builder = self._builder(
            POST, "/projects", {}, "CreateProjectV2", options, options.refresh_token, timeout
        )
        builder.set_body_json(
            {
                "name": options.name,
                "region": options.region,
                "resource_group_id": options.resource_group_id,
                "tags": options.tags,
            }
        )
        logger.info("Creating project", name=options.name, region=options.region)
        response = self.send(builder.build(), "json")
        response.result = Project.from_api_response(response.result)
        logger.info("Created project", id=response.result.id)
        return response

    def get_project(
        self, options: GetProjectOptions | None, timeout: float | None = None
    ) -> DetailedResponse[Project]:
        """Get a project by GUID."""
        validate_options(options, "get_project_options")
        assert options is not None
        builder = self._builder(
            GET,
            "/projects/{project_guid}",
            {"project_guid": options.project_guid},
            "GetProjectV2",
            options,
            options.refresh_token,
            timeout,
        )
        logger.debug("Getting project", project_guid=options.project_guid)
        response = self.send(builder.build(), "json")
        response.result = Project.from_api_response(response.result)
        return response

    def delete_project(
        self, options: DeleteProjectOptions | None, timeout: float | None = None
    ) -> DetailedResponse[None]:
        """Delete a project. The project moves to the reclamations list."""
        validate_options(options, "delete_project_options")
        assert options is not None
        builder = self._builder(
            DELETE,
            "/projects/{project_guid}",
            {"project_guid": options.project_guid},
            "DeleteProjectV2",
            options,
            options.refresh_token,
            timeout,
            accept_json=False,
        )
        logger.info("Deleting project", project_guid=options.project_guid)
        return self.send(builder.build())

    # Configmaps

    def list_configmaps(
        self, options: ListConfigmapsOptions | None, timeout: float | None = None
    ) -> DetailedResponse[ConfigMapList]:
        """List the configmaps of a project."""
        validate_options(options, "list_configmaps_options")
        assert options is not None
        builder = self._builder(
            GET,
            "/projects/{project_guid}/configmaps",
            {"project_guid": options.project_guid},
            "ListConfigmapsV2",
            options,
            options.refresh_token,
            timeout,
        )
        builder.add_query("limit", options.limit).add_query("start", options.start)
        logger.debug("Listing configmaps", project_guid=options.project_guid)
        response = self.send(builder.build(), "json")
        response.result = ConfigMapList.from_api_response(response.result)
        return response

    def create_configmap(
        self, options: CreateConfigmapOptions | None, timeout: float | None = None
    ) -> DetailedResponse[ConfigMap]:
        """Create a configmap in a project."""
        validate_options(options, "create_configmap_options")
        assert options is not None
        builder = self._builder(
            POST,
            "/projects/{project_guid}/configmaps",
            {"project_guid": options.project_guid},
            "CreateConfigmapV2",
            options,
            options.refresh_token,
            timeout,
        )
        builder.set_body_json(_configmap_body(options))
        logger.info("Creating configmap", project_guid=options.project_guid, name=options.name)
        response = self.send(builder.build(), "json")
        response.result = ConfigMap.from_api_response(response.result)
        return response

    def get_configmap(
        self, options: GetConfigmapOptions | None, timeout: float | None = None
    ) -> DetailedResponse[ConfigMap]:
        """Get a configmap by name."""
        validate_options(options, "get_configmap_options")
        assert options is not None
        builder = self._builder(
            GET,
            "/projects/{project_guid}/configmaps/{configmap_name}",
            {"project_guid": options.project_guid, "configmap_name": options.configmap_name},
            "GetConfigmapV2",
            options,
            options.refresh_token,
            timeout,
        )
        response = self.send(builder.build(), "json")
        response.result = ConfigMap.from_api_response(response.result)
        return response

    def update_configmap(
        self, options: UpdateConfigmapOptions | None, timeout: float | None = None
    ) -> DetailedResponse[ConfigMap]:
        """Partially update a configmap."""
        validate_options(options, "update_configmap_options")
        assert options is not None
        builder = self._builder(
            PATCH,
            "/projects/{project_guid}/configmaps/{configmap_name}",
            {"project_guid": options.project_guid, "configmap_name": options.configmap_name},
            "UpdateConfigmapV2",
            options,
            options.refresh_token,
            timeout,
        )
        builder.set_body_json(_configmap_body(options))
        logger.info(
            "Updating configmap",
            project_guid=options.project_guid,
            configmap_name=options.configmap_name,
        )
        response = self.send(builder.build(), "json")
        response.result = ConfigMap.from_api_response(response.result)
        return response

    def delete_configmap(
        self, options: DeleteConfigmapOptions | None, timeout: float | None = None
    ) -> DetailedResponse[None]:
        """Delete a configmap."""
        validate_options(options, "delete_configmap_options")
        assert options is not None
        builder = self._builder(
            DELETE,
            "/projects/{project_guid}/configmaps/{configmap_name}",
            {"project_guid": options.project_guid, "configmap_name": options.configmap_name},
            "DeleteConfigmapV2",
            options,
            options.refresh_token,
            timeout,
            accept_json=False,
        )
        logger.info(
            "Deleting configmap",
            project_guid=options.project_guid,
            configmap_name=options.configmap_name,
        )
        return self.send(builder.build())

    # Reclamations

    def list_reclamations(
        self, options: ListReclamationsOptions | None, timeout: float | None = None
    ) -> DetailedResponse[ReclamationList]:
        """List deleted projects that can still be restored."""
        validate_options(options, "list_reclamations_options")
        assert options is not None
        builder = self._builder(
            GET, "/reclamations", {}, "ListReclamationsV2", options, options.refresh_token, timeout
        )
        response = self.send(builder.build(), "json")
        response.result = ReclamationList.from_api_response(response.result)
        return response

    def get_reclamation(
        self, options: GetReclamationOptions | None, timeout: float | None = None
    ) -> DetailedResponse[Reclamation]:
        validate_options(options, "get_reclamation_options")
        assert options is not None
        return self._reclamation_call(
            GET, "/reclamations/{project_guid}", "GetReclamationV2", options, timeout
        )

    def reclaim_reclamation(
        self, options: ReclaimReclamationOptions | None, timeout: float | None = None
    ) -> DetailedResponse[Reclamation]:
        """Permanently delete a soft-deleted project."""
        validate_options(options, "reclaim_reclamation_options")
        assert options is not None
        logger.info("Reclaiming project", project_guid=options.project_guid)
        return self._reclamation_call(
            POST, "/reclamations/{project_guid}/reclaim", "ReclaimReclamationV2", options, timeout
        )

    def restore_reclamation(
        self, options: RestoreReclamationOptions | None, timeout: float | None = None
    ) -> DetailedResponse[Reclamation]:
        """Restore a soft-deleted project."""
        validate_options(options, "restore_reclamation_options")
        assert options is not None
        logger.info("Restoring project", project_guid=options.project_guid)
        return self._reclamation_call(
            POST, "/reclamations/{project_guid}/restore", "RestoreReclamationV2", options, timeout
        )

    def _reclamation_call(
        self,
        method: str,
        path: str,
        operation_id: str,
        options: GetReclamationOptions | ReclaimReclamationOptions | RestoreReclamationOptions,
        timeout: float | None,
    ) -> DetailedResponse[Reclamation]:
        builder = self._builder(
            method,
            path,
            {"project_guid": options.project_guid},
            operation_id,
            options,
            options.refresh_token,
            timeout,
        )
        response = self.send(builder.build(), "json")
        response.result = Reclamation.from_api_response(response.result)
        return response

    # Option factories

    @staticmethod
    def new_list_projects_options(refresh_token: str, **fields: Any) -> ListProjectsOptions:
        return ListProjectsOptions(refresh_token=refresh_token, **fields)

    @staticmethod
    def new_create_project_options(refresh_token: str, **fields: Any) -> CreateProjectOptions:
        return CreateProjectOptions(refresh_token=refresh_token, **fields)

    @staticmethod
    def new_get_project_options(refresh_token: str, project_guid: str) -> GetProjectOptions:
        return GetProjectOptions(refresh_token=refresh_token, project_guid=project_guid)

    @staticmethod
    def new_delete_project_options(refresh_token: str, project_guid: str) -> DeleteProjectOptions:
        return DeleteProjectOptions(refresh_token=refresh_token, project_guid=project_guid)

    @staticmethod
    def new_list_configmaps_options(
        refresh_token: str, project_guid: str, **fields: Any
    ) -> ListConfigmapsOptions:
        return ListConfigmapsOptions(
            refresh_token=refresh_token, project_guid=project_guid, **fields
        )

    @staticmethod
    def new_create_configmap_options(
        refresh_token: str, project_guid: str, **fields: Any
    ) -> CreateConfigmapOptions:
        return CreateConfigmapOptions(
            refresh_token=refresh_token, project_guid=project_guid, **fields
        )

    @staticmethod
    def new_get_configmap_options(
        refresh_token: str, project_guid: str, configmap_name: str
    ) -> GetConfigmapOptions:
        return GetConfigmapOptions(
            refresh_token=refresh_token, project_guid=project_guid, configmap_name=configmap_name
        )

    @staticmethod
    def new_update_configmap_options(
        refresh_token: str, project_guid: str, configmap_name: str, **fields: Any
    ) -> UpdateConfigmapOptions:
        return UpdateConfigmapOptions(
            refresh_token=refresh_token,
            project_guid=project_guid,
            configmap_name=configmap_name,
            **fields,
        )

    @staticmethod
    def new_delete_configmap_options(
        refresh_token: str, project_guid: str, configmap_name: str
    ) -> DeleteConfigmapOptions:
        return DeleteConfigmapOptions(
            refresh_token=refresh_token, project_guid=project_guid, configmap_name=configmap_name
        )

    @staticmethod
    def new_list_reclamations_options(refresh_token: str) -> ListReclamationsOptions:
        return ListReclamationsOptions(refresh_token=refresh_token)

    @staticmethod
    def new_get_reclamation_options(refresh_token: str, project_guid: str) -> GetReclamationOptions:
        return GetReclamationOptions(refresh_token=refresh_token, project_guid=project_guid)

    @staticmethod
    def new_reclaim_reclamation_options(
        refresh_token: str, project_guid: str
    ) -> ReclaimReclamationOptions:
        return ReclaimReclamationOptions(refresh_token=refresh_token, project_guid=project_guid)

    @staticmethod
    def new_restore_reclamation_options(
        refresh_token: str, project_guid: str
    ) -> RestoreReclamationOptions:
        return RestoreReclamationOptions(refresh_token=refresh_token, project_guid=project_guid)


def _configmap_body(options: CreateConfigmapOptions | UpdateConfigmapOptions) -> dict[str, Any]:
    return {field: getattr(options, field) for field in _CONFIGMAP_BODY_FIELDS}
