"""External service configuration.

A service is configured from a mapping of ``<SERVICE_NAME>_<KEY>`` variables
(the process environment unless another mapping is given) and an optional YAML
credentials file, e.g. for ``code_engine``::

    CODE_ENGINE_URL=https://api.eu-de.codeengine.cloud.ibm.com/v2
    CODE_ENGINE_AUTH_TYPE=iam
    CODE_ENGINE_APIKEY=...

or, in ``~/.config/code-engine/credentials.yaml``::

    code_engine:
      url: https://api.eu-de.codeengine.cloud.ibm.com/v2
      auth_type: iam
      apikey: ...

Variables take precedence over the file.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from code_engine_sdk.core.authenticators import (
    AUTHTYPE_BEARERTOKEN,
    AUTHTYPE_IAM,
    AUTHTYPE_NOAUTH,
    Authenticator,
    BearerTokenAuthenticator,
    IamAuthenticator,
    NoAuthAuthenticator,
)
from code_engine_sdk.core.exceptions import CodeEngineConfigError

CREDENTIALS_FILE_ENV = "CODE_ENGINE_CREDENTIALS_FILE"

_CONFIG_KEYS = (
    "url",
    "auth_type",
    "apikey",
    "auth_url",
    "client_id",
    "client_secret",
    "bearer_token",
    "scope",
    "disable_ssl",
    "auth_disable_ssl",
    "enable_gzip",
    "enable_retries",
    "max_retries",
    "retry_interval",
)


class ServiceConfig(BaseModel):
    """Settings of one service, as read from external configuration."""

    model_config = ConfigDict(extra="ignore")

    url: str | None = Field(default=None, description="Service endpoint URL")
    auth_type: str | None = Field(default=None, description="iam, bearertoken or noauth")
    apikey: SecretStr | None = Field(default=None, description="IBM Cloud API key")
    auth_url: str | None = Field(default=None, description="IAM identity service URL")
    client_id: str | None = None
    client_secret: SecretStr | None = None
    bearer_token: SecretStr | None = None
    scope: str | None = None
    disable_ssl: bool = False
    auth_disable_ssl: bool = False
    enable_gzip: bool = False
    enable_retries: bool = False
    max_retries: int = Field(default=4, ge=0)
    retry_interval: float = Field(default=30.0, gt=0)

    @field_validator("auth_type")
    @classmethod
    def _normalize_auth_type(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().lower().replace("_", "")
        if normalized not in (AUTHTYPE_IAM, AUTHTYPE_BEARERTOKEN, AUTHTYPE_NOAUTH):
            raise ValueError(f"unsupported auth_type {value!r}")
        return normalized

    def resolved_auth_type(self) -> str | None:
        """The configured auth type, defaulting to IAM when an API key is present."""
        if self.auth_type:
            return self.auth_type
        if self.apikey is not None:
            return AUTHTYPE_IAM
        return None


def _env_prefix(service_name: str) -> str:
    return service_name.upper().replace("-", "_") + "_"


def get_credentials_path(environ: Mapping[str, str] | None = None) -> Path:
    """Path of the YAML credentials file.

    Returns:
        ``$CODE_ENGINE_CREDENTIALS_FILE`` or ``~/.config/code-engine/credentials.yaml``.
    """
    env = os.environ if environ is None else environ
    override = env.get(CREDENTIALS_FILE_ENV)
    if override:
        return Path(override)
    return Path.home() / ".config" / "code-engine" / "credentials.yaml"


def _read_credentials_file(service_name: str, path: Path, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise CodeEngineConfigError(
                "Credentials file not found",
                details=str(path),
            )
        return {}

    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CodeEngineConfigError("Invalid credentials file format", details=str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CodeEngineConfigError(
            "Credentials file must contain a mapping of service names",
            details=str(path),
        )
    section = data.get(service_name) or {}
    if not isinstance(section, dict):
        raise CodeEngineConfigError(
            f"Credentials for '{service_name}' must be a mapping",
            details=str(path),
        )
    return {key: value for key, value in section.items() if key in _CONFIG_KEYS}


def load_service_config(
    service_name: str,
    environ: Mapping[str, str] | None = None,
    config_file: Path | str | None = None,
) -> ServiceConfig:
    """Load the external configuration of ``service_name``.

    Args:
        service_name: Service key, e.g. ``code_engine``.
        environ: Variables to read instead of ``os.environ``.
        config_file: Explicit credentials file; must exist when given.

    Returns:
        The merged configuration.

    Raises:
        CodeEngineConfigError: If the file or a value is invalid.
    """
    env = os.environ if environ is None else environ
    if config_file is not None:
        values = _read_credentials_file(service_name, Path(config_file), required=True)
    else:
        values = _read_credentials_file(service_name, get_credentials_path(env), required=False)

    prefix = _env_prefix(service_name)
    for key in _CONFIG_KEYS:
        value = env.get(prefix + key.upper())
        if value:
            values[key] = value

    try:
        return ServiceConfig.model_validate(values)
    except ValidationError as e:
        raise CodeEngineConfigError(
            f"Invalid configuration for service '{service_name}'",
            details=str(e),
        ) from e


def authenticator_from_config(service_name: str, config: ServiceConfig) -> Authenticator:
    """Build the authenticator described by ``config``.

    Raises:
        CodeEngineConfigError: If no usable credentials are configured.
    """
    auth_type = config.resolved_auth_type()
    if auth_type == AUTHTYPE_IAM:
        if config.apikey is None:
            raise CodeEngineConfigError(f"No API key configured for service '{service_name}'")
        return IamAuthenticator(
            config.apikey.get_secret_value(),
            url=config.auth_url,
            client_id=config.client_id,
            client_secret=(
                config.client_secret.get_secret_value() if config.client_secret else None
            ),
            disable_ssl_verification=config.auth_disable_ssl,
            scope=config.scope,
        )
    if auth_type == AUTHTYPE_BEARERTOKEN:
        if config.bearer_token is None:
            raise CodeEngineConfigError(
                f"No bearer token configured for service '{service_name}'"
            )
        return BearerTokenAuthenticator(config.bearer_token.get_secret_value())
    if auth_type == AUTHTYPE_NOAUTH:
        return NoAuthAuthenticator()
    raise CodeEngineConfigError(
        f"No credentials configured for service '{service_name}'",
        details=f"Set {_env_prefix(service_name)}APIKEY or {_env_prefix(service_name)}AUTH_TYPE",
    )


def get_authenticator_from_environment(
    service_name: str,
    environ: Mapping[str, str] | None = None,
    config_file: Path | str | None = None,
) -> Authenticator:
    """Load configuration for ``service_name`` and build its authenticator."""
    config = load_service_config(service_name, environ=environ, config_file=config_file)
    return authenticator_from_config(service_name, config)
