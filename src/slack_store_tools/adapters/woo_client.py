"""WooCommerce REST API client."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

import httpx

_logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429})

_TRANSIENT_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


class WooClient(Protocol):
    """Interface for WooCommerce API interactions."""

    async def get(self, path: str, params: dict[str, object] | None = None) -> object:
        """Issue a GET request and return the decoded JSON body."""

    async def put(self, path: str, body: dict[str, object]) -> object:
        """Issue a PUT request and return the decoded JSON body, if any."""


def is_retryable(exc: Exception) -> bool:
    """Return true when a failed read may be retried safely."""
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        return status_code in RETRYABLE_STATUS_CODES or status_code >= 500
    return isinstance(exc, _TRANSIENT_ERRORS)


@dataclass
class HttpxWooClient(WooClient):
    """HTTPX-backed WooCommerce client.

    Reads are retried on throttling, server errors and transient network
    failures with a linear backoff. Writes are issued exactly once: a PUT
    that reached the store may have been applied, so the operator decides
    whether to run the command again.
    """

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0
    retries: int = 2
    backoff_seconds: float = 0.25
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        base_url: str,
        username: str,
        password: str,
        timeout_seconds: float = 15.0,
        retries: int = 2,
        backoff_seconds: float = 0.25,
    ) -> "HttpxWooClient":
        """Create a client with a managed httpx session using Basic auth."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(auth=httpx.BasicAuth(username, password)),
            timeout_seconds=timeout_seconds,
            retries=retries,
            backoff_seconds=backoff_seconds,
        )

    async def get(self, path: str, params: dict[str, object] | None = None) -> object:
        """Fetch a resource, retrying transient failures."""
        url = f"{self.base_url}{path}"
        attempt = 0
        while True:
            try:
                response = await self.http_client.get(
                    url, params=params, timeout=self.timeout_seconds
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                attempt += 1
                if attempt > self.retries or not is_retryable(exc):
                    raise
                delay = self.backoff_seconds * attempt
                _logger.warning(
                    "Woo GET %s failed (attempt %s/%s, status=%s), retrying in %.2fs",
                    path,
                    attempt,
                    self.retries + 1,
                    _status_code_from_exception(exc),
                    delay,
                )
                await self.sleep(delay)
                continue
            return _decode_json(response)

    async def put(self, path: str, body: dict[str, object]) -> object:
        """Update a resource. Never retried.

        A 2xx response means the write was applied, so an undecodable body
        yields None instead of an error.
        """
        url = f"{self.base_url}{path}"
        response = await self.http_client.put(
            url, json=body, timeout=self.timeout_seconds
        )
        response.raise_for_status()
        try:
            return response.json()
        except ValueError:
            _logger.warning(
                "Woo PUT %s succeeded with a non-JSON body (status=%s)",
                path,
                response.status_code,
            )
            return None

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _decode_json(response: httpx.Response) -> object:
    """Decode a read response, raising an httpx error for a malformed body."""
    try:
        return response.json()
    except ValueError as exc:
        raise httpx.DecodingError(
            f"Malformed JSON from {response.request.url.path}",
            request=response.request,
        ) from exc


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
