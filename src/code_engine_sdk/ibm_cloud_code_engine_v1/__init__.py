"""IBM Cloud Code Engine V1: kubeconfig retrieval."""

from code_engine_sdk.ibm_cloud_code_engine_v1.client import (
    DEFAULT_SERVICE_NAME,
    DEFAULT_SERVICE_URL,
    IbmCloudCodeEngineV1,
)
from code_engine_sdk.ibm_cloud_code_engine_v1.options import (
    GetKubeconfigOptions,
    ListKubeconfigOptions,
)

__all__ = [
    "DEFAULT_SERVICE_NAME",
    "DEFAULT_SERVICE_URL",
    "GetKubeconfigOptions",
    "IbmCloudCodeEngineV1",
    "ListKubeconfigOptions",
]
