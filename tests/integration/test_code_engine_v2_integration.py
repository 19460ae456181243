"""Integration tests for CodeEngineV2 with IAM authentication."""

from __future__ import annotations

import httpx
import pytest
import respx
from httpx import Response

from code_engine_sdk.code_engine_v2 import CodeEngineV2
from code_engine_sdk.core.authenticators import IamAuthenticator

IAM_URL = "https://iam.test.cloud.ibm.com"
CE_URL = "https://api.eu-de.codeengine.cloud.ibm.com/v2"


@pytest.mark.integration
class TestProjectLifecycle:
    """Drive several operations through one authenticated client."""

    @respx.mock
    def test_lifecycle_reuses_iam_token(self) -> None:
        iam = respx.post(f"{IAM_URL}/identity/token").mock(
            return_value=Response(200, json={"access_token": "access", "refresh_token": "rt"})
        )
        respx.post(f"{CE_URL}/projects").mock(
            return_value=Response(201, json={"id": "p-1", "name": "n", "status": "creating"})
        )
        respx.get(f"{CE_URL}/projects/p-1").mock(
            return_value=Response(200, json={"id": "p-1", "name": "n", "status": "active"})
        )
        delete = respx.delete(f"{CE_URL}/projects/p-1").mock(return_value=Response(202))
        reclamations = respx.get(f"{CE_URL}/reclamations").mock(
            return_value=Response(
                200, json={"reclamations": [{"id": "r-1", "project_id": "p-1", "status": "soft_deleted"}]}
            )
        )

        authenticator = IamAuthenticator("key", url=IAM_URL, client_id="bx", client_secret="bx")
        with CodeEngineV2(authenticator, service_url=CE_URL) as service:
            refresh_token = authenticator.refresh_token
            assert refresh_token == "rt"

            created = service.create_project(
                service.new_create_project_options(refresh_token, name="n", region="eu-de")
            ).get_result()
            assert created is not None
            assert created.id == "p-1"

            fetched = service.get_project(
                service.new_get_project_options(refresh_token, "p-1")
            ).get_result()
            assert fetched is not None
            assert fetched.is_active

            assert service.delete_project(
                service.new_delete_project_options(refresh_token, "p-1")
            ).get_status_code() == 202

            listed = service.list_reclamations(
                service.new_list_reclamations_options(refresh_token)
            ).get_result()
            assert listed is not None
            assert listed.reclamations[0].project_id == "p-1"

        assert iam.call_count == 1
        assert delete.calls.last.request.headers["Authorization"] == "Bearer access"
        assert reclamations.calls.last.request.headers["Refresh-Token"] == "rt"

    @respx.mock
    def test_retries_recover_from_unavailable(self) -> None:
        respx.post(f"{IAM_URL}/identity/token").mock(
            return_value=Response(200, json={"access_token": "access", "refresh_token": "rt"})
        )
        route = respx.get(f"{CE_URL}/projects").mock(
            side_effect=[
                httpx.ConnectError("reset"),
                Response(503),
                Response(200, json={"projects": [{"id": "p-1"}]}),
            ]
        )
        service = CodeEngineV2(IamAuthenticator("key", url=IAM_URL), service_url=CE_URL)
        service.enable_retries(max_retries=3, max_retry_interval=0.001)

        result = service.list_projects(service.new_list_projects_options("rt")).get_result()

        assert result is not None
        assert len(result.projects) == 1
        assert route.call_count == 3
