"""Request construction, authentication and execution shared by all services."""

from code_engine_sdk.core.authenticators import (
    Authenticator,
    BearerTokenAuthenticator,
    IamAuthenticator,
    IamToken,
    NoAuthAuthenticator,
)
from code_engine_sdk.core.base_service import BaseService
from code_engine_sdk.core.config import (
    ServiceConfig,
    get_authenticator_from_environment,
    load_service_config,
)
from code_engine_sdk.core.detailed_response import DetailedResponse
from code_engine_sdk.core.exceptions import (
    CodeEngineAPIError,
    CodeEngineAuthError,
    CodeEngineConfigError,
    CodeEngineConnectionError,
    CodeEngineDecodeError,
    CodeEngineError,
    CodeEngineNotFoundError,
    CodeEngineTimeoutError,
    CodeEngineValidationError,
    ServiceURLMissingError,
    TokenExchangeError,
    TokenPayloadError,
)
from code_engine_sdk.core.options import OperationOptions, validate_options
from code_engine_sdk.core.request_builder import RequestBuilder

__all__ = [
    "Authenticator",
    "BaseService",
    "BearerTokenAuthenticator",
    "CodeEngineAPIError",
    "CodeEngineAuthError",
    "CodeEngineConfigError",
    "CodeEngineConnectionError",
    "CodeEngineDecodeError",
    "CodeEngineError",
    "CodeEngineNotFoundError",
    "CodeEngineTimeoutError",
    "CodeEngineValidationError",
    "DetailedResponse",
    "IamAuthenticator",
    "IamToken",
    "NoAuthAuthenticator",
    "OperationOptions",
    "RequestBuilder",
    "ServiceConfig",
    "ServiceURLMissingError",
    "TokenExchangeError",
    "TokenPayloadError",
    "get_authenticator_from_environment",
    "load_service_config",
    "validate_options",
]
