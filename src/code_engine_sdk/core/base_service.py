"""Common HTTP plumbing shared by the service clients."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import httpx
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from code_engine_sdk.core.authenticators import Authenticator
from code_engine_sdk.core.config import load_service_config
from code_engine_sdk.core.detailed_response import DetailedResponse
from code_engine_sdk.core.exceptions import (
    CodeEngineAPIError,
    CodeEngineAuthError,
    CodeEngineConfigError,
    CodeEngineConnectionError,
    CodeEngineDecodeError,
    CodeEngineNotFoundError,
    CodeEngineTimeoutError,
)
from code_engine_sdk.core.request_builder import RequestBuilder
from code_engine_sdk.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 4
DEFAULT_MAX_RETRY_INTERVAL = 30.0
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

ResponseType = Literal["json", "text"] | None


def _is_retryable(error: BaseException) -> bool:
    if isinstance(error, CodeEngineTimeoutError):
        return False
    if isinstance(error, CodeEngineConnectionError):
        return True
    return isinstance(error, CodeEngineAPIError) and error.status_code in RETRYABLE_STATUS_CODES


def _error_message(response: httpx.Response) -> str:
    """Pull a human readable message out of an error response body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            message = errors[0].get("message")
            if message:
                return str(message)
        for key in ("error", "message", "errorMessage"):
            if isinstance(body.get(key), str) and body[key]:
                return str(body[key])
    return response.reason_phrase or f"HTTP {response.status_code}"


class BaseService:
    """Executes requests for one service endpoint.

    Holds the service URL, the authenticator and one ``httpx.Client``. No
    state is kept per call, so a service instance may be shared between
    threads as long as its configuration is not changed while calls are in
    flight.
    """

    def __init__(
        self,
        service_url: str,
        authenticator: Authenticator | None,
        *,
        timeout: float | None = DEFAULT_TIMEOUT,
        disable_ssl_verification: bool = False,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            service_url: Base URL every operation path is resolved against.
            authenticator: Adds credentials to each request.
            timeout: Default deadline of a call in seconds, None for no limit.
            disable_ssl_verification: Skip TLS verification of the service.
            transport: httpx transport override, used by tests.

        Raises:
            CodeEngineConfigError: If the authenticator is missing or invalid.
        """
        if authenticator is None:
            raise CodeEngineConfigError("authenticator must be provided")
        authenticator.validate()
        self.authenticator = authenticator
        self.timeout = timeout
        self.default_headers = httpx.Headers()
        self._service_url = ""
        self._enable_gzip = False
        self._max_retries = 0
        self._max_retry_interval = DEFAULT_MAX_RETRY_INTERVAL
        self._disable_ssl_verification = disable_ssl_verification
        self._transport = transport
        self._client = self._new_http_client()
        self.set_service_url(service_url)

    def _new_http_client(self) -> httpx.Client:
        return httpx.Client(
            verify=not self._disable_ssl_verification,
            transport=self._transport,
        )

    def __enter__(self) -> BaseService:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    @property
    def service_url(self) -> str:
        return self._service_url

    def set_service_url(self, url: str | None) -> None:
        """Set the base URL.

        An empty URL is accepted; every later call then fails before any
        network I/O.

        Raises:
            CodeEngineConfigError: If the URL still contains ``{`` or ``}``.
        """
        url = (url or "").strip()
        if "{" in url or "}" in url:
            raise CodeEngineConfigError(
                "The service URL cannot contain '{' or '}'",
                details="Replace the URL template variables with concrete values",
            )
        self._service_url = url.rstrip("/")

    def set_default_headers(self, headers: Mapping[str, str]) -> None:
        """Headers sent with every request, below all per-call headers."""
        self.default_headers = httpx.Headers(dict(headers))

    @property
    def enable_gzip_compression(self) -> bool:
        return self._enable_gzip

    def set_enable_gzip_compression(self, enable_gzip: bool) -> None:
        """Compress request bodies with gzip."""
        self._enable_gzip = enable_gzip

    def set_disable_ssl_verification(self, disable: bool) -> None:
        self._disable_ssl_verification = disable
        self._client.close()
        self._client = self._new_http_client()

    def enable_retries(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        max_retry_interval: float = DEFAULT_MAX_RETRY_INTERVAL,
    ) -> None:
        """Retry transient failures with exponential backoff.

        Retries are off by default. When enabled, connection failures and
        429/500/502/503/504 answers are retried; deadline expiry never is.
        A value of 0 selects the default for that parameter.
        """
        self._max_retries = max_retries or DEFAULT_MAX_RETRIES
        self._max_retry_interval = max_retry_interval or DEFAULT_MAX_RETRY_INTERVAL

    def disable_retries(self) -> None:
        self._max_retries = 0

    @property
    def retries_enabled(self) -> bool:
        return self._max_retries > 0

    def configure_service(
        self,
        service_name: str,
        environ: Mapping[str, str] | None = None,
        config_file: Path | str | None = None,
    ) -> None:
        """Apply external configuration (URL, TLS, gzip, retries) for ``service_name``."""
        config = load_service_config(service_name, environ=environ, config_file=config_file)
        if config.url:
            self.set_service_url(config.url)
        if config.disable_ssl:
            self.set_disable_ssl_verification(True)
        if config.enable_gzip:
            self.set_enable_gzip_compression(True)
        if config.enable_retries:
            self.enable_retries(config.max_retries, config.retry_interval)
        logger.debug(
            "Service configured",
            service_name=service_name,
            service_url=self._service_url,
            retries=self.retries_enabled,
        )

    def clone(self) -> BaseService:
        """Copy this service with an independent HTTP client and header set."""
        clone = copy.copy(self)
        clone.default_headers = httpx.Headers(self.default_headers)
        clone._client = clone._new_http_client()
        return clone

    def new_request_builder(self, method: str, timeout: float | None = None) -> RequestBuilder:
        """Start a request carrying the service-wide defaults.

        Args:
            method: HTTP method.
            timeout: Deadline of this call; the service default when None.
        """
        builder = RequestBuilder(method)
        builder.with_timeout(timeout if timeout is not None else self.timeout)
        builder.enable_gzip_compression(self._enable_gzip)
        builder.add_headers(self.default_headers)
        return builder

    def send(
        self,
        request: httpx.Request,
        response_type: ResponseType = None,
    ) -> DetailedResponse[Any]:
        """Authenticate and execute ``request``.

        Args:
            request: Request produced by a :class:`RequestBuilder`.
            response_type: ``"json"``, ``"text"`` or None when no body is expected.

        Returns:
            The response envelope with the decoded body as ``result``.

        Raises:
            CodeEngineTimeoutError: When the deadline elapses.
            CodeEngineConnectionError: On connection failure.
            CodeEngineAPIError: On a non-2xx status.
            CodeEngineDecodeError: When the body does not match ``response_type``.
        """
        self.authenticator.authenticate(request)
        if not self.retries_enabled:
            return self._send_once(request, response_type)

        retrying = Retrying(
            retry=retry_if_exception(_is_retryable),
            stop=stop_after_attempt(self._max_retries + 1),
            wait=wait_exponential(multiplier=1, max=self._max_retry_interval),
            reraise=True,
        )
        return retrying(self._send_once, request, response_type)

    def _send_once(
        self,
        request: httpx.Request,
        response_type: ResponseType,
    ) -> DetailedResponse[Any]:
        logger.debug("Sending request", method=request.method, url=str(request.url))
        try:
            response = self._client.send(request)
        except httpx.TimeoutException as e:
            logger.error("Request deadline exceeded", url=str(request.url), error=str(e))
            raise CodeEngineTimeoutError(
                "Request exceeded its deadline",
                details=str(e),
            ) from e
        except httpx.TransportError as e:
            logger.error("Request connection failed", url=str(request.url), error=str(e))
            raise CodeEngineConnectionError(
                f"Failed to connect to {request.url.host}: {e}",
                details=str(e),
            ) from e

        detailed: DetailedResponse[Any] = DetailedResponse(response.status_code, response.headers)
        if not response.is_success:
            raise self._api_error(response, detailed)

        detailed.result = self._decode(response, response_type)
        return detailed

    @staticmethod
    def _api_error(response: httpx.Response, detailed: DetailedResponse[Any]) -> CodeEngineAPIError:
        message = _error_message(response)
        logger.error(
            "Request failed",
            status_code=response.status_code,
            transaction_id=detailed.transaction_id,
            message=message,
        )
        error_class: type[CodeEngineAPIError] = CodeEngineAPIError
        if response.status_code in (401, 403):
            error_class = CodeEngineAuthError
        elif response.status_code == 404:
            error_class = CodeEngineNotFoundError
        return error_class(
            message,
            status_code=response.status_code,
            details=response.text,
            transaction_id=detailed.transaction_id,
            response=detailed,
        )

    @staticmethod
    def _decode(response: httpx.Response, response_type: ResponseType) -> Any:
        if response_type is None:
            return None
        if response_type == "text":
            return response.text
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise CodeEngineDecodeError(
                "Response body is not valid JSON",
                details=response.text[:200],
            ) from e
