"""HTTP request construction."""

from __future__ import annotations

import gzip
import json
import re
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from code_engine_sdk.core.exceptions import (
    CodeEngineValidationError,
    ServiceURLMissingError,
)

_PLACEHOLDER_RE = re.compile(r"\{([^{}/]+)\}")

GET = "GET"
POST = "POST"
PUT = "PUT"
PATCH = "PATCH"
DELETE = "DELETE"


class RequestBuilder:
    """Assembles a single ``httpx.Request``.

    Nothing is sent: ``build`` only computes the request from the state given
    to the builder. Headers live in an ``httpx.Headers`` mapping, which keeps
    insertion order and compares names case-insensitively; adding a header
    that already exists replaces its value, so callers apply sources from
    lowest to highest precedence.

    Example:
        ```python
        builder = RequestBuilder(GET)
        builder.resolve_request_url(service_url, "/projects/{project_guid}", {"project_guid": guid})
        builder.add_header("Accept", "application/json")
        request = builder.build()
        ```
    """

    def __init__(self, method: str) -> None:
        self.method = method.upper()
        self.url: str | None = None
        self.headers = httpx.Headers()
        self.query: list[tuple[str, str]] = []
        self.body: bytes | None = None
        self.timeout: float | None = None
        self.gzip_body = False

    def resolve_request_url(
        self,
        service_url: str,
        path_template: str,
        path_params: Mapping[str, str] | None = None,
    ) -> str:
        """Join ``service_url`` with ``path_template`` after parameter substitution.

        Each ``{name}`` placeholder is replaced once by its percent-encoded
        value. Values are never re-scanned for placeholders.

        Raises:
            ServiceURLMissingError: If ``service_url`` is empty.
            CodeEngineValidationError: If a placeholder has no value or an
                empty value.
        """
        if not service_url:
            raise ServiceURLMissingError()
        params = path_params or {}

        def _substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in params:
                raise CodeEngineValidationError(f"path parameter '{name}' has no value")
            return self._encode_path_value(name, params[name])

        path = _PLACEHOLDER_RE.sub(_substitute, path_template)
        self.url = service_url.rstrip("/") + path
        return self.url

    def construct_http_url(
        self,
        service_url: str,
        path_segments: Sequence[str],
        path_parameters: Sequence[str],
    ) -> str:
        """Build a URL by interleaving fixed segments with parameter values.

        ``["namespaces", "config"]`` and ``["abc"]`` give
        ``{service_url}/namespaces/abc/config``.
        """
        if not service_url:
            raise ServiceURLMissingError()
        parts: list[str] = []
        for index, segment in enumerate(path_segments):
            if segment:
                parts.append(segment)
            if index < len(path_parameters):
                parts.append(self._encode_path_value(segment, path_parameters[index]))
        self.url = service_url.rstrip("/") + "/" + "/".join(parts)
        return self.url

    @staticmethod
    def _encode_path_value(name: str, value: str) -> str:
        if value is None or value == "":
            raise CodeEngineValidationError(f"path parameter '{name}' is empty")
        return quote(str(value), safe="")

    def add_header(self, name: str, value: str) -> RequestBuilder:
        self.headers[name] = value
        return self

    def add_headers(self, headers: Mapping[str, str] | None) -> RequestBuilder:
        """Apply every header of ``headers`` in order."""
        for name, value in (headers or {}).items():
            self.headers[name] = value
        return self

    def add_query(self, name: str, value: Any) -> RequestBuilder:
        if value is not None:
            self.query.append((name, str(value)))
        return self

    def set_body_json(self, body: Mapping[str, Any]) -> RequestBuilder:
        """Serialize ``body`` as JSON, dropping unset (None) members."""
        payload = {key: value for key, value in body.items() if value is not None}
        self.body = json.dumps(payload).encode("utf-8")
        self.headers["Content-Type"] = "application/json"
        return self

    def set_body_form(self, data: Mapping[str, str]) -> RequestBuilder:
        self.body = urlencode(data).encode("utf-8")
        self.headers["Content-Type"] = "application/x-www-form-urlencoded"
        return self

    def with_timeout(self, timeout: float | None) -> RequestBuilder:
        """Bound the whole exchange; ``None`` disables the limit."""
        self.timeout = timeout
        return self

    def enable_gzip_compression(self, enabled: bool = True) -> RequestBuilder:
        self.gzip_body = enabled
        return self

    def build(self) -> httpx.Request:
        """Return the finished request.

        Raises:
            CodeEngineValidationError: If no URL was resolved.
        """
        if self.url is None:
            raise CodeEngineValidationError("request URL has not been resolved")

        headers = httpx.Headers(self.headers)
        content = self.body
        if content is not None and self.gzip_body:
            content = gzip.compress(content)
            headers["Content-Encoding"] = "gzip"

        return httpx.Request(
            self.method,
            self.url,
            params=self.query or None,
            headers=headers,
            content=content,
            extensions={"timeout": httpx.Timeout(self.timeout).as_dict()},
        )
