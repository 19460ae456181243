"""Unit tests for operation options validation."""

from __future__ import annotations

import pydantic
import pytest

from code_engine_sdk.code_engine_v2.options import GetConfigmapOptions, ListProjectsOptions
from code_engine_sdk.core.exceptions import CodeEngineValidationError
from code_engine_sdk.core.options import validate_options
from code_engine_sdk.ibm_cloud_code_engine_v1.options import GetKubeconfigOptions


@pytest.mark.unit
class TestValidateOptions:
    """Tests for validate_options."""

    def test_none_options_raise(self) -> None:
        with pytest.raises(CodeEngineValidationError, match="get_kubeconfig_options cannot be None"):
            validate_options(None, "get_kubeconfig_options")

    def test_empty_options_list_every_required_field(self) -> None:
        with pytest.raises(CodeEngineValidationError) as exc_info:
            validate_options(GetKubeconfigOptions(), "get_kubeconfig_options")
        assert "x_delegated_refresh_token" in exc_info.value.message
        assert "id" in exc_info.value.message
        assert exc_info.value.details == "GetKubeconfigOptions"

    def test_empty_string_counts_as_missing(self) -> None:
        options = GetConfigmapOptions(refresh_token="rt", project_guid="p1", configmap_name="")
        assert options.missing_fields() == ["configmap_name"]

    def test_complete_options_pass(self) -> None:
        validate_options(ListProjectsOptions(refresh_token="rt"), "list_projects_options")


@pytest.mark.unit
class TestOperationOptions:
    """Tests for options models."""

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ListProjectsOptions(refresh_token="rt", bogus="x")  # type: ignore[call-arg]

    def test_assignment_is_validated(self) -> None:
        options = ListProjectsOptions(refresh_token="rt")
        with pytest.raises(pydantic.ValidationError):
            options.headers = "not-a-mapping"  # type: ignore[assignment]

    def test_fields_can_be_set_after_construction(self) -> None:
        options = GetKubeconfigOptions()
        options.id = "p1"
        options.x_delegated_refresh_token = "drt"
        options.headers = {"X-Test": "1"}
        assert options.missing_fields() == []
