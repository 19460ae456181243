"""Kubeconfig command: fetch a project's kubeconfig and inspect the project."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.client.rest import ApiException
from kubernetes.config import ConfigException

from code_engine_sdk.cli.commands.base import (
    CLI_CLIENT_ID,
    CLI_CLIENT_SECRET,
    DEFAULT_IAM_ENDPOINT,
    ApiHostOption,
    ApiKeyOption,
    IamEndpointOption,
    console,
    handle_code_engine_error,
)
from code_engine_sdk.core.authenticators import IamAuthenticator
from code_engine_sdk.core.exceptions import CodeEngineConfigError, CodeEngineError
from code_engine_sdk.ibm_cloud_code_engine_v1 import IbmCloudCodeEngineV1
from code_engine_sdk.logging import get_logger

logger = get_logger(__name__)


def project_namespace(kubeconfig: dict[str, Any]) -> str:
    """Namespace of the kubeconfig's current context, ``default`` when unset.

    Raises:
        CodeEngineConfigError: If the contexts are malformed.
    """
    current = kubeconfig.get("current-context")
    contexts = kubeconfig.get("contexts") or []
    if not isinstance(contexts, list):
        raise CodeEngineConfigError("Kubeconfig contexts is not a list")
    for entry in contexts:
        if not isinstance(entry, dict):
            raise CodeEngineConfigError("Kubeconfig context is not a mapping", details=repr(entry))
        if entry.get("name") != current:
            continue
        context = entry.get("context") or {}
        if not isinstance(context, dict):
            raise CodeEngineConfigError(
                "Kubeconfig context is not a mapping", details=f"context {current!r}"
            )
        return context.get("namespace") or "default"
    return "default"


def count_project_configmaps(kubeconfig_text: str) -> tuple[str, int]:
    """Connect with ``kubeconfig_text`` and count the configmaps of its namespace.

    Returns:
        The namespace and the number of configmaps in it.

    Raises:
        CodeEngineConfigError: If the kubeconfig cannot be parsed or loaded.
        CodeEngineError: If the Kubernetes API rejects a call.
    """
    try:
        kubeconfig = yaml.safe_load(kubeconfig_text)
    except yaml.YAMLError as e:
        raise CodeEngineConfigError("Kubeconfig is not valid YAML", details=str(e)) from e
    if not isinstance(kubeconfig, dict):
        raise CodeEngineConfigError("Kubeconfig is not a mapping")
    namespace = project_namespace(kubeconfig)

    try:
        api_client = k8s_config.new_client_from_config_dict(kubeconfig)
    except ConfigException as e:
        raise CodeEngineConfigError("Cannot load kubeconfig", details=str(e)) from e

    core_v1 = k8s_client.CoreV1Api(api_client)
    try:
        configmaps = core_v1.list_namespaced_config_map(namespace)
    except ApiException as e:
        raise CodeEngineError(
            f"Kubernetes API call failed: {e.reason}",
            details=f"status {e.status}",
        ) from e
    finally:
        api_client.close()
    return namespace, len(configmaps.items)


def _service_url(api_host: str | None, region: str | None) -> str:
    if api_host:
        return f"https://{api_host}/api/v1"
    if region:
        return IbmCloudCodeEngineV1.get_service_url_for_region(region)
    raise CodeEngineConfigError(
        "No Code Engine endpoint configured",
        details="Set CE_API_HOST or CE_PROJECT_REGION",
    )


def kubeconfig(
    apikey: ApiKeyOption,
    project_id: Annotated[
        str,
        typer.Option("--project-id", envvar="CE_PROJECT_ID", help="Code Engine project id"),
    ],
    api_host: ApiHostOption = None,
    region: Annotated[
        str | None,
        typer.Option("--region", envvar="CE_PROJECT_REGION", help="Project region, e.g. eu-de"),
    ] = None,
    iam_endpoint: IamEndpointOption = DEFAULT_IAM_ENDPOINT,
    legacy: Annotated[
        bool,
        typer.Option("--legacy", help="Use the deprecated refresh token flow"),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the kubeconfig to this file"),
    ] = None,
) -> None:
    """Fetch a project's kubeconfig and count the configmaps in the project."""
    try:
        authenticator = IamAuthenticator(
            apikey,
            url=iam_endpoint,
            client_id=CLI_CLIENT_ID,
            client_secret=CLI_CLIENT_SECRET,
        )
        with IbmCloudCodeEngineV1(
            authenticator, service_url=_service_url(api_host, region)
        ) as service:
            console.print(f"Obtaining a kube config of project '{project_id}'")
            if legacy:
                options = service.new_list_kubeconfig_options(
                    authenticator.refresh_token or "", project_id
                )
                result = service.list_kubeconfig(options).get_result()
            else:
                delegated = authenticator.request_delegated_refresh_token()
                options = service.new_get_kubeconfig_options(delegated, project_id)
                result = service.get_kubeconfig(options).get_result()

        kubeconfig_text = result or ""
        if output is not None:
            output.write_text(kubeconfig_text)
            console.print(f"Kubeconfig written to {output}")

        namespace, count = count_project_configmaps(kubeconfig_text)
    except CodeEngineError as e:
        handle_code_engine_error(e)
    else:
        logger.info("Counted configmaps", namespace=namespace, count=count)
        console.print(f"Project {project_id} has {count} configmaps.")
