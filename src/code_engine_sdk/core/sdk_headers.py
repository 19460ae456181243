"""SDK identification headers sent with every request."""

from __future__ import annotations

import platform

from code_engine_sdk.__version__ import __version__

SDK_NAME = "code-engine-python-sdk"
ANALYTICS_HEADER = "X-IBMCloud-SDK-Analytics"


def get_user_agent() -> str:
    """Build the User-Agent value, e.g. ``code-engine-python-sdk-1.2.0 (lang=python; ...)``."""
    return (
        f"{SDK_NAME}-{__version__} "
        f"(lang=python; arch={platform.machine()}; os={platform.system()}; "
        f"python.version={platform.python_version()})"
    )


def get_sdk_headers(service_name: str, service_version: str, operation_id: str) -> dict[str, str]:
    """Return the headers identifying the SDK and the invoked operation.

    Args:
        service_name: Service key, e.g. ``code_engine``.
        service_version: API version label, e.g. ``V2``.
        operation_id: Operation name, e.g. ``ListProjectsV2``.
    """
    return {
        "User-Agent": get_user_agent(),
        ANALYTICS_HEADER: (
            f"service_name={service_name};service_version={service_version};"
            f"operation_id={operation_id}"
        ),
    }
