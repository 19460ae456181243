"""Unit tests for IbmCloudCodeEngineV1."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import respx

from code_engine_sdk.core.authenticators import NoAuthAuthenticator
from code_engine_sdk.core.config import CREDENTIALS_FILE_ENV
from code_engine_sdk.core.exceptions import (
    CodeEngineConfigError,
    CodeEngineNotFoundError,
    CodeEngineValidationError,
    ServiceURLMissingError,
)
from code_engine_sdk.ibm_cloud_code_engine_v1 import (
    DEFAULT_SERVICE_URL,
    GetKubeconfigOptions,
    IbmCloudCodeEngineV1,
    ListKubeconfigOptions,
)

SERVICE_URL = "https://api.eu-de.codeengine.cloud.ibm.com/api/v1"


@pytest.fixture
def service() -> IbmCloudCodeEngineV1:
    return IbmCloudCodeEngineV1(NoAuthAuthenticator(), service_url=SERVICE_URL)


@pytest.mark.unit
class TestConstruction:
    """Tests for building the client."""

    def test_default_service_url(self) -> None:
        service = IbmCloudCodeEngineV1(NoAuthAuthenticator())
        assert service.service_url == DEFAULT_SERVICE_URL

    def test_missing_authenticator_raises(self) -> None:
        with pytest.raises(CodeEngineConfigError):
            IbmCloudCodeEngineV1(None)

    def test_regional_url(self) -> None:
        assert IbmCloudCodeEngineV1.get_service_url_for_region("eu-de") == SERVICE_URL

    def test_new_instance_from_environment(self, tmp_path: Path) -> None:
        environ = {
            "IBM_CLOUD_CODE_ENGINE_AUTH_TYPE": "noauth",
            "IBM_CLOUD_CODE_ENGINE_URL": SERVICE_URL,
            CREDENTIALS_FILE_ENV: str(tmp_path / "absent.yaml"),
        }
        service = IbmCloudCodeEngineV1.new_instance(environ=environ)

        assert isinstance(service.authenticator, NoAuthAuthenticator)
        assert service.service_url == SERVICE_URL

    def test_new_instance_with_custom_service_name(self, tmp_path: Path) -> None:
        environ = {
            "MY_CE_AUTH_TYPE": "noauth",
            CREDENTIALS_FILE_ENV: str(tmp_path / "absent.yaml"),
        }
        service = IbmCloudCodeEngineV1.new_instance("my_ce", environ=environ)
        assert service.service_url == DEFAULT_SERVICE_URL


@pytest.mark.unit
class TestGetKubeconfig:
    """Tests for get_kubeconfig."""

    @respx.mock
    def test_returns_plain_text(self, service: IbmCloudCodeEngineV1) -> None:
        route = respx.get(f"{SERVICE_URL}/project/p-1/config").mock(
            return_value=httpx.Response(
                200, text="OperationResponse", headers={"Content-Type": "text/plain"}
            )
        )
        options = service.new_get_kubeconfig_options("drt", "p-1")

        response = service.get_kubeconfig(options)

        assert response.get_status_code() == 200
        assert response.get_result() == "OperationResponse"
        sent = route.calls.last.request
        assert sent.headers["X-Delegated-Refresh-Token"] == "drt"
        assert sent.headers["Accept"] == "text/plain"
        assert sent.headers["X-IBMCloud-SDK-Analytics"] == (
            "service_name=ibm_cloud_code_engine;service_version=V1;operation_id=GetKubeconfig"
        )
        assert sent.headers["User-Agent"].startswith("code-engine-python-sdk-")

    @respx.mock
    def test_custom_headers_and_accept_override(self, service: IbmCloudCodeEngineV1) -> None:
        route = respx.get(f"{SERVICE_URL}/project/p-1/config").mock(
            return_value=httpx.Response(200, text="{}")
        )
        options = GetKubeconfigOptions(
            x_delegated_refresh_token="drt",
            id="p-1",
            accept="application/json",
            headers={"X-Test": "1", "X-Delegated-Refresh-Token": "from-headers"},
        )

        service.get_kubeconfig(options)

        sent = route.calls.last.request
        assert sent.headers["X-Test"] == "1"
        assert sent.headers["Accept"] == "application/json"
        assert sent.headers["X-Delegated-Refresh-Token"] == "drt"

    @respx.mock
    def test_project_id_is_escaped(self, service: IbmCloudCodeEngineV1) -> None:
        route = respx.get(url__startswith=SERVICE_URL).mock(
            return_value=httpx.Response(200, text="x")
        )
        service.get_kubeconfig(service.new_get_kubeconfig_options("drt", "a/b"))
        assert route.calls.last.request.url.raw_path == b"/api/v1/project/a%2Fb/config"

    def test_none_options_raise(self, service: IbmCloudCodeEngineV1) -> None:
        with pytest.raises(CodeEngineValidationError, match="cannot be None"):
            service.get_kubeconfig(None)

    def test_empty_options_raise(self, service: IbmCloudCodeEngineV1) -> None:
        with pytest.raises(CodeEngineValidationError, match="missing required fields"):
            service.get_kubeconfig(GetKubeconfigOptions())

    def test_empty_service_url_raises(self, service: IbmCloudCodeEngineV1) -> None:
        service.set_service_url("")
        with pytest.raises(ServiceURLMissingError, match="service URL is empty"):
            service.get_kubeconfig(service.new_get_kubeconfig_options("drt", "p-1"))

    @respx.mock
    def test_not_found(self, service: IbmCloudCodeEngineV1) -> None:
        respx.get(f"{SERVICE_URL}/project/p-1/config").mock(
            return_value=httpx.Response(404, json={"message": "project not found"})
        )
        with pytest.raises(CodeEngineNotFoundError, match="project not found"):
            service.get_kubeconfig(service.new_get_kubeconfig_options("drt", "p-1"))


@pytest.mark.unit
class TestListKubeconfig:
    """Tests for the deprecated list_kubeconfig."""

    @respx.mock
    def test_returns_plain_text(self, service: IbmCloudCodeEngineV1) -> None:
        route = respx.get(f"{SERVICE_URL}/namespaces/p-1/config").mock(
            return_value=httpx.Response(200, text="OperationResponse")
        )
        options = service.new_list_kubeconfig_options("rt", "p-1")

        with pytest.warns(DeprecationWarning, match="get_kubeconfig"):
            response = service.list_kubeconfig(options)

        assert response.get_result() == "OperationResponse"
        sent = route.calls.last.request
        assert sent.headers["Refresh-Token"] == "rt"
        assert sent.headers["Accept"] == "text/plain"
        assert "operation_id=ListKubeconfig" in sent.headers["X-IBMCloud-SDK-Analytics"]

    def test_empty_options_raise(self, service: IbmCloudCodeEngineV1) -> None:
        with (
            pytest.warns(DeprecationWarning),
            pytest.raises(CodeEngineValidationError, match="refresh_token"),
        ):
            service.list_kubeconfig(ListKubeconfigOptions())

    def test_empty_service_url_raises(self, service: IbmCloudCodeEngineV1) -> None:
        service.set_service_url("")
        with pytest.warns(DeprecationWarning), pytest.raises(ServiceURLMissingError):
            service.list_kubeconfig(service.new_list_kubeconfig_options("rt", "p-1"))


@pytest.mark.unit
class TestMockServerResponses:
    """Both kubeconfig flows against the same canned answer."""

    @respx.mock
    def test_legacy_flow_with_test_values(self, service: IbmCloudCodeEngineV1) -> None:
        route = respx.get(
            f"{SERVICE_URL}/namespaces/testString/config", headers={"Refresh-Token": "testString"}
        ).mock(return_value=httpx.Response(200, text="OperationResponse"))

        with pytest.warns(DeprecationWarning):
            response = service.list_kubeconfig(
                ListKubeconfigOptions(refresh_token="testString", id="testString")
            )

        assert route.called
        assert response.get_result() == "OperationResponse"

    @respx.mock
    def test_current_flow_with_test_values(self, service: IbmCloudCodeEngineV1) -> None:
        route = respx.get(
            f"{SERVICE_URL}/project/testString/config",
            headers={"X-Delegated-Refresh-Token": "testString"},
        ).mock(return_value=httpx.Response(200, text="OperationResponse"))

        response = service.get_kubeconfig(
            GetKubeconfigOptions(x_delegated_refresh_token="testString", id="testString")
        )

        assert route.called
        assert response.get_result() == "OperationResponse"
