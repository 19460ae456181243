"""Code Engine SDK exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from code_engine_sdk.core.detailed_response import DetailedResponse


class CodeEngineError(Exception):
    """Base exception for Code Engine SDK errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message.
            details: Additional details.
        """
        super().__init__(message)
        self.message = message
        self.details = details


class CodeEngineValidationError(CodeEngineError):
    """Raised when operation input is missing or invalid.

    Always raised before any network I/O takes place.
    """


class ServiceURLMissingError(CodeEngineValidationError):
    """Raised when a request is built against an empty service URL."""

    def __init__(self) -> None:
        super().__init__("service URL is empty")


class CodeEngineConfigError(CodeEngineError):
    """Raised when configuration is invalid or missing."""


class CodeEngineConnectionError(CodeEngineError):
    """Raised when the connection to a remote endpoint fails."""


class CodeEngineTimeoutError(CodeEngineConnectionError):
    """Raised when a call exceeds its deadline."""


class CodeEngineAPIError(CodeEngineError):
    """Raised when a remote endpoint answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: str | None = None,
        transaction_id: str | None = None,
        response: DetailedResponse | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message.
            status_code: HTTP status code.
            details: Additional details, usually the raw response body.
            transaction_id: Value of the transaction id response header.
            response: The response envelope that carried the error.
        """
        super().__init__(message, details)
        self.status_code = status_code
        self.transaction_id = transaction_id
        self.response = response

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.transaction_id:
            parts.append(f"[transaction-id: {self.transaction_id}]")
        return " ".join(parts)


class CodeEngineAuthError(CodeEngineAPIError):
    """Raised when the service rejects the credentials (401/403)."""


class CodeEngineNotFoundError(CodeEngineAPIError):
    """Raised when a resource is not found."""


class TokenExchangeError(CodeEngineAPIError):
    """Raised when the identity service refuses a token exchange."""


class CodeEngineDecodeError(CodeEngineError):
    """Raised when a response body does not match its declared shape."""


class TokenPayloadError(CodeEngineDecodeError):
    """Raised when the identity service returns a malformed token payload."""
