"""Authenticators that attach credentials to outgoing requests."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

import httpx
from pydantic import BaseModel, Field, ValidationError

from code_engine_sdk.core.exceptions import (
    CodeEngineConfigError,
    CodeEngineConnectionError,
    CodeEngineTimeoutError,
    TokenExchangeError,
    TokenPayloadError,
)
from code_engine_sdk.core.request_builder import POST, RequestBuilder
from code_engine_sdk.core.sdk_headers import get_user_agent
from code_engine_sdk.logging import get_logger

logger = get_logger(__name__)

DEFAULT_IAM_URL = "https://iam.cloud.ibm.com"
IAM_TOKEN_PATH = "/identity/token"
APIKEY_GRANT_TYPE = "urn:ibm:params:oauth:grant-type:apikey"

AUTHTYPE_IAM = "iam"
AUTHTYPE_BEARERTOKEN = "bearertoken"
AUTHTYPE_NOAUTH = "noauth"


class Authenticator(ABC):
    """Adds authentication information to a request before it is sent."""

    auth_type: ClassVar[str]

    @abstractmethod
    def authenticate(self, request: httpx.Request) -> None:
        """Add credentials to ``request`` in place."""

    def validate(self) -> None:
        """Check the configuration.

        Raises:
            CodeEngineConfigError: If the authenticator cannot work as configured.
        """


class NoAuthAuthenticator(Authenticator):
    """Sends requests without credentials."""

    auth_type = AUTHTYPE_NOAUTH

    def authenticate(self, request: httpx.Request) -> None:
        return None


class BearerTokenAuthenticator(Authenticator):
    """Sends a caller-managed bearer token."""

    auth_type = AUTHTYPE_BEARERTOKEN

    def __init__(self, bearer_token: str) -> None:
        self.bearer_token = bearer_token
        self.validate()

    def validate(self) -> None:
        if not self.bearer_token:
            raise CodeEngineConfigError("bearer_token cannot be empty")

    def authenticate(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = f"Bearer {self.bearer_token}"


class IamToken(BaseModel):
    """Token payload returned by the IAM identity service."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = "Bearer"
    expires_in: int | None = None
    expiration: int | None = Field(default=None, description="Expiry as epoch seconds")

    @property
    def is_expired(self) -> bool:
        return self.expiration is not None and time.time() >= self.expiration


class IamAuthenticator(Authenticator):
    """Exchanges an IBM Cloud API key for IAM tokens.

    The token held by the authenticator is fetched once, on first use, and
    reused for the lifetime of the instance. Call :meth:`request_token` to
    exchange the API key again.

    Example:
        ```python
        authenticator = IamAuthenticator(apikey, client_id="bx", client_secret="bx")
        delegated = authenticator.request_delegated_refresh_token()
        ```
    """

    auth_type = AUTHTYPE_IAM

    def __init__(
        self,
        apikey: str,
        url: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        *,
        disable_ssl_verification: bool = False,
        scope: str | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the authenticator.

        Args:
            apikey: IBM Cloud API key.
            url: Identity service base URL. Defaults to the public endpoint.
            client_id: Client id sent as basic auth user on token requests.
            client_secret: Client secret sent as basic auth password.
            disable_ssl_verification: Skip TLS verification of the identity service.
            scope: Optional space separated list of scopes.
            headers: Extra headers sent with every token request.
            timeout: Deadline for a token request in seconds.
            transport: httpx transport override, used by tests.
        """
        self.apikey = apikey
        self.url = (url or DEFAULT_IAM_URL).rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.disable_ssl_verification = disable_ssl_verification
        self.scope = scope
        self.headers = dict(headers or {})
        self.timeout = timeout
        self._transport = transport
        self._token: IamToken | None = None
        self.validate()

    def validate(self) -> None:
        if not self.apikey:
            raise CodeEngineConfigError("apikey cannot be empty")
        if bool(self.client_id) != bool(self.client_secret):
            raise CodeEngineConfigError(
                "client_id and client_secret must both be set or both be unset"
            )

    @property
    def token(self) -> IamToken | None:
        """The most recently obtained token, if any."""
        return self._token

    def authenticate(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = f"Bearer {self.get_token()}"

    def get_token(self) -> str:
        """Return the held access token, exchanging the API key if none is held.

        An expired token is returned as is and only logged; call
        :meth:`request_token` to renew it.
        """
        if self._token is None:
            self.request_token()
        assert self._token is not None
        if self._token.is_expired:
            logger.warning("Held IAM token has expired", expiration=self._token.expiration)
        return self._token.access_token

    @property
    def refresh_token(self) -> str | None:
        """Refresh token of the held token, exchanging the API key if none is held."""
        if self._token is None:
            self.request_token()
        assert self._token is not None
        return self._token.refresh_token

    def request_token(self) -> IamToken:
        """Exchange the API key for a fresh access and refresh token.

        Raises:
            CodeEngineConnectionError: On network failure.
            TokenExchangeError: On a non-2xx answer.
            TokenPayloadError: If the answer is not a token payload.
        """
        form = {
            "grant_type": APIKEY_GRANT_TYPE,
            "apikey": self.apikey,
            "response_type": "cloud_iam",
        }
        if self.scope:
            form["scope"] = self.scope
        data = self._post_token_request(form)
        try:
            token = IamToken.model_validate(data)
        except ValidationError as e:
            raise TokenPayloadError(
                "IAM token response is missing required fields", details=str(e)
            ) from e
        self._token = token
        logger.debug("Obtained IAM token", expires_in=token.expires_in)
        return token

    def request_delegated_refresh_token(
        self,
        receiver_client_ids: Iterable[str] = ("ce",),
        expiry: int = 3600,
    ) -> str:
        """Obtain a refresh token delegated to the given receiver services.

        Args:
            receiver_client_ids: Client ids allowed to use the token.
            expiry: Lifetime of the delegated token in seconds.

        Returns:
            The delegated refresh token.

        Raises:
            CodeEngineConnectionError: On network failure.
            TokenExchangeError: On a non-2xx answer.
            TokenPayloadError: If the answer has no delegated refresh token.
        """
        form = {
            "grant_type": APIKEY_GRANT_TYPE,
            "apikey": self.apikey,
            "response_type": "delegated_refresh_token",
            "receiver_client_ids": ",".join(receiver_client_ids),
            "delegated_refresh_token_expiry": str(expiry),
        }
        data = self._post_token_request(form)
        delegated = data.get("delegated_refresh_token")
        if not isinstance(delegated, str) or not delegated:
            raise TokenPayloadError(
                "IAM response does not contain a delegated_refresh_token",
                details=", ".join(sorted(data)),
            )
        logger.debug("Obtained delegated refresh token", expiry=expiry)
        return delegated

    def _post_token_request(self, form: Mapping[str, str]) -> dict[str, Any]:
        builder = RequestBuilder(POST)
        builder.resolve_request_url(self.url, IAM_TOKEN_PATH)
        builder.add_header("User-Agent", get_user_agent())
        builder.add_headers(self.headers)
        builder.add_header("Accept", "application/json")
        builder.set_body_form(form)
        builder.with_timeout(self.timeout)
        request = builder.build()

        auth = None
        if self.client_id and self.client_secret:
            auth = httpx.BasicAuth(self.client_id, self.client_secret)

        try:
            with httpx.Client(
                verify=not self.disable_ssl_verification,
                transport=self._transport,
                auth=auth,
            ) as client:
                response = client.send(request)
        except httpx.TimeoutException as e:
            logger.error("IAM token request timed out", url=self.url, error=str(e))
            raise CodeEngineTimeoutError(
                "Request to the IAM identity service timed out", details=str(e)
            ) from e
        except httpx.TransportError as e:
            logger.error("IAM token request connection failed", url=self.url, error=str(e))
            raise CodeEngineConnectionError(
                f"Failed to connect to the IAM identity service: {e}", details=str(e)
            ) from e

        transaction_id = response.headers.get("Transaction-Id") or response.headers.get(
            "X-Transaction-Id"
        )
        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = response.text
            if isinstance(body, dict):
                message = body.get("errorMessage") or body.get("message") or message
            logger.error(
                "IAM token request failed",
                status_code=response.status_code,
                transaction_id=transaction_id,
            )
            raise TokenExchangeError(
                f"IAM token request failed: {message}",
                status_code=response.status_code,
                details=response.text,
                transaction_id=transaction_id,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TokenPayloadError("IAM token response is not valid JSON", details=response.text) from e
        if not isinstance(data, dict):
            raise TokenPayloadError("IAM token response is not a JSON object", details=response.text)
        return data
