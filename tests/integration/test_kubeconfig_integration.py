"""Integration tests for IbmCloudCodeEngineV1 against a local HTTP server."""

from __future__ import annotations

import pytest

from code_engine_sdk.core.authenticators import NoAuthAuthenticator
from code_engine_sdk.core.exceptions import (
    CodeEngineAPIError,
    CodeEngineTimeoutError,
    ServiceURLMissingError,
)
from code_engine_sdk.ibm_cloud_code_engine_v1 import GetKubeconfigOptions, IbmCloudCodeEngineV1


@pytest.fixture
def service(local_server) -> IbmCloudCodeEngineV1:
    return IbmCloudCodeEngineV1(NoAuthAuthenticator(), service_url=local_server.url)


@pytest.mark.integration
class TestGetKubeconfigOverHttp:
    """Exercise real HTTP exchanges for the kubeconfig operations."""

    def test_get_kubeconfig(self, service: IbmCloudCodeEngineV1, local_server) -> None:
        options = GetKubeconfigOptions(x_delegated_refresh_token="drt", id="p-1")

        response = service.get_kubeconfig(options)

        assert response.get_status_code() == 200
        assert response.get_result() == "OperationResponse"
        request = local_server.canned.requests[-1]
        assert request["method"] == "GET"
        assert request["path"] == "/project/p-1/config"
        assert request["headers"]["X-Delegated-Refresh-Token"] == "drt"
        assert request["headers"]["Accept"] == "text/plain"

    def test_list_kubeconfig(self, service: IbmCloudCodeEngineV1, local_server) -> None:
        options = service.new_list_kubeconfig_options("rt", "p-1")

        with pytest.warns(DeprecationWarning):
            response = service.list_kubeconfig(options)

        assert response.get_result() == "OperationResponse"
        request = local_server.canned.requests[-1]
        assert request["path"] == "/namespaces/p-1/config"
        assert request["headers"]["Refresh-Token"] == "rt"

    def test_deadline_exceeded(self, service: IbmCloudCodeEngineV1, local_server) -> None:
        local_server.canned.delay = 0.1
        options = service.new_get_kubeconfig_options("drt", "p-1")

        with pytest.raises(CodeEngineTimeoutError):
            service.get_kubeconfig(options, timeout=0.08)

    def test_call_succeeds_after_deadline_failure(
        self, service: IbmCloudCodeEngineV1, local_server
    ) -> None:
        local_server.canned.delay = 0.1
        options = service.new_get_kubeconfig_options("drt", "p-1")
        with pytest.raises(CodeEngineTimeoutError):
            service.get_kubeconfig(options, timeout=0.08)

        local_server.canned.delay = 0.0
        assert service.get_kubeconfig(options).get_result() == "OperationResponse"

    def test_empty_service_url_fails_without_io(
        self, service: IbmCloudCodeEngineV1, local_server
    ) -> None:
        service.set_service_url("")
        with pytest.raises(ServiceURLMissingError):
            service.get_kubeconfig(service.new_get_kubeconfig_options("drt", "p-1"))
        assert local_server.canned.requests == []

    def test_server_error(self, service: IbmCloudCodeEngineV1, local_server) -> None:
        local_server.canned.status = 500
        local_server.canned.body = b'{"errors": [{"message": "internal"}]}'
        local_server.canned.content_type = "application/json"

        with pytest.raises(CodeEngineAPIError) as exc_info:
            service.get_kubeconfig(service.new_get_kubeconfig_options("drt", "p-1"))

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "internal"
