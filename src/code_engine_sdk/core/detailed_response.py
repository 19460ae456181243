"""Response envelope returned by every service operation."""

from __future__ import annotations

from typing import Generic, TypeVar

import httpx

T = TypeVar("T")

TRANSACTION_ID_HEADERS = ("X-Global-Transaction-Id", "X-Transaction-Id")


class DetailedResponse(Generic[T]):
    """Status code, headers and decoded result of one HTTP exchange.

    ``result`` is ``None`` for operations without a response body and for
    error responses.
    """

    def __init__(
        self,
        status_code: int,
        headers: httpx.Headers | None = None,
        result: T | None = None,
    ) -> None:
        self.status_code = status_code
        self.headers = headers if headers is not None else httpx.Headers()
        self.result = result

    def get_result(self) -> T | None:
        return self.result

    def get_headers(self) -> httpx.Headers:
        return self.headers

    def get_status_code(self) -> int:
        return self.status_code

    @property
    def transaction_id(self) -> str | None:
        """The transaction id header, if the service sent one."""
        for header in TRANSACTION_ID_HEADERS:
            if header in self.headers:
                return self.headers[header]
        return None

    def __repr__(self) -> str:
        return (
            f"DetailedResponse(status_code={self.status_code}, "
            f"transaction_id={self.transaction_id!r}, result={self.result!r})"
        )
