"""Code Engine V2 API client."""

from code_engine_sdk.code_engine_v2.client import (
    DEFAULT_SERVICE_NAME,
    DEFAULT_SERVICE_URL,
    CodeEngineV2,
)
from code_engine_sdk.code_engine_v2.models import (
    ConfigMap,
    ConfigMapList,
    PaginationListNextMetadata,
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

__all__ = [
    "DEFAULT_SERVICE_NAME",
    "DEFAULT_SERVICE_URL",
    "CodeEngineV2",
    "ConfigMap",
    "ConfigMapList",
    "CreateConfigmapOptions",
    "CreateProjectOptions",
    "DeleteConfigmapOptions",
    "DeleteProjectOptions",
    "GetConfigmapOptions",
    "GetProjectOptions",
    "GetReclamationOptions",
    "ListConfigmapsOptions",
    "ListProjectsOptions",
    "ListReclamationsOptions",
    "PaginationListNextMetadata",
    "Project",
    "ProjectList",
    "ReclaimReclamationOptions",
    "Reclamation",
    "ReclamationList",
    "RestoreReclamationOptions",
    "UpdateConfigmapOptions",
]
