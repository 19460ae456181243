"""IbmCloudCodeEngineV1: retrieve the kubeconfig of a Code Engine project."""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from pathlib import Path

import httpx

from code_engine_sdk.core.authenticators import Authenticator
from code_engine_sdk.core.base_service import DEFAULT_TIMEOUT, BaseService
from code_engine_sdk.core.config import get_authenticator_from_environment
from code_engine_sdk.core.detailed_response import DetailedResponse
from code_engine_sdk.core.options import validate_options
from code_engine_sdk.core.request_builder import GET
from code_engine_sdk.core.sdk_headers import get_sdk_headers
from code_engine_sdk.ibm_cloud_code_engine_v1.options import (
    GetKubeconfigOptions,
    ListKubeconfigOptions,
)
from code_engine_sdk.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SERVICE_URL = "https://ibm-cloud-code-engine.cloud.ibm.com/api/v1"
DEFAULT_SERVICE_NAME = "ibm_cloud_code_engine"
SERVICE_VERSION = "V1"
KUBECONFIG_MEDIA_TYPE = "text/plain"


class IbmCloudCodeEngineV1(BaseService):
    """Client for the Code Engine kubeconfig API.

    Two operations return the same payload, the project's kubeconfig as
    plain text:

    - ``get_kubeconfig`` authenticates with an IAM delegated refresh token
      issued for the ``ce`` receiver.
    - ``list_kubeconfig`` authenticates with a plain IAM refresh token and is
      deprecated.

    Example:
        ```python
        authenticator = IamAuthenticator(apikey)
        with IbmCloudCodeEngineV1(authenticator, service_url=url) as service:
            options = service.new_get_kubeconfig_options(
                authenticator.request_delegated_refresh_token(), project_id
            )
            kubeconfig = service.get_kubeconfig(options).get_result()
        ```
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
    ) -> IbmCloudCodeEngineV1:
        """Build a client from external configuration.

        Args:
            service_name: Key of the configuration, ``IBM_CLOUD_CODE_ENGINE_*``
                by default.
            environ: Variables to read instead of ``os.environ``.
            config_file: Explicit YAML credentials file.
        """
        authenticator = get_authenticator_from_environment(
            service_name, environ=environ, config_file=config_file
        )
        service = cls(authenticator)
        service.configure_service(service_name, environ=environ, config_file=config_file)
        return service

    @staticmethod
    def get_service_url_for_region(region: str) -> str:
        """Regional URL of the kubeconfig API, e.g. for ``eu-de``."""
        return f"https://api.{region}.codeengine.cloud.ibm.com/api/v1"

    def list_kubeconfig(
        self,
        options: ListKubeconfigOptions | None,
        timeout: float | None = None,
    ) -> DetailedResponse[str]:
        """Retrieve the kubeconfig of a project with a refresh token.

        Deprecated: use :meth:`get_kubeconfig`, which targets the current
        ``/project/{id}/config`` path with a delegated refresh token.

        Args:
            options: Refresh token and project id.
            timeout: Deadline of this call in seconds.

        Returns:
            Response whose result is the kubeconfig text.
        """
        warnings.warn(
            "list_kubeconfig is deprecated, use get_kubeconfig",
            DeprecationWarning,
            stacklevel=2,
        )
        validate_options(options, "list_kubeconfig_options")
        assert options is not None

        builder = self.new_request_builder(GET, timeout)
        builder.construct_http_url(self.service_url, ["namespaces", "config"], [options.id])
        builder.add_headers(get_sdk_headers(DEFAULT_SERVICE_NAME, SERVICE_VERSION, "ListKubeconfig"))
        builder.add_header("Accept", KUBECONFIG_MEDIA_TYPE)
        builder.add_headers(options.headers)
        builder.add_header("Refresh-Token", options.refresh_token)
        if options.accept is not None:
            builder.add_header("Accept", options.accept)

        logger.debug("Listing kubeconfig", project_id=options.id)
        return self.send(builder.build(), "text")

    def get_kubeconfig(
        self,
        options: GetKubeconfigOptions | None,
        timeout: float | None = None,
    ) -> DetailedResponse[str]:
        """Retrieve the kubeconfig of a project with a delegated refresh token.

        Args:
            options: Delegated refresh token and project id.
            timeout: Deadline of this call in seconds.

        Returns:
            Response whose result is the kubeconfig text, usable as-is by a
            Kubernetes client.
        """
        validate_options(options, "get_kubeconfig_options")
        assert options is not None

        builder = self.new_request_builder(GET, timeout)
        builder.resolve_request_url(self.service_url, "/project/{id}/config", {"id": options.id})
        builder.add_headers(get_sdk_headers(DEFAULT_SERVICE_NAME, SERVICE_VERSION, "GetKubeconfig"))
        builder.add_header("Accept", KUBECONFIG_MEDIA_TYPE)
        builder.add_headers(options.headers)
        builder.add_header("X-Delegated-Refresh-Token", options.x_delegated_refresh_token)
        if options.accept is not None:
            builder.add_header("Accept", options.accept)

        logger.debug("Getting kubeconfig", project_id=options.id)
        return self.send(builder.build(), "text")

    @staticmethod
    def new_list_kubeconfig_options(refresh_token: str, id: str) -> ListKubeconfigOptions:
        return ListKubeconfigOptions(refresh_token=refresh_token, id=id)

    @staticmethod
    def new_get_kubeconfig_options(
        x_delegated_refresh_token: str, id: str
    ) -> GetKubeconfigOptions:
        return GetKubeconfigOptions(x_delegated_refresh_token=x_delegated_refresh_token, id=id)
