"""Low-level HTTP transport layer wrapping httpx, plus retry with backoff."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx

from jolpica.config import DEFAULT_BASE_URL
from jolpica.exceptions import (
    ClientError,
    JolpicaConnectionError,
    JolpicaError,
    JolpicaTimeoutError,
    JolpicaValidationError,
    NetworkError,
    RateLimitedError,
    ServerError,
)

DEFAULT_TIMEOUT = 30.0

Sleep = Callable[[float], Awaitable[None]]

logger = logging.getLogger(__name__)


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _is_throttled(body: Any) -> bool:
    """True when the payload carries a throttling notice, whatever the status."""
    if not isinstance(body, dict):
        return False
    for field in ("detail", "message"):
        text = body.get(field)
        if isinstance(text, str) and "throttled" in text.lower():
            return True
    return False


def _handle_response(response: httpx.Response) -> dict[str, Any]:
    """Classify the response and return parsed JSON."""
    body = _json_or_none(response)
    if response.status_code == 429 or _is_throttled(body):
        raise RateLimitedError(status_code=response.status_code, message="throttled")
    if response.status_code >= 500:
        raise ServerError(status_code=response.status_code, message=response.text)
    if not response.is_success:
        raise ClientError(status_code=response.status_code, message=response.text)
    if not isinstance(body, dict):
        raise JolpicaValidationError(
            f"Expected a JSON object from {response.request.url}, got {type(body).__name__}"
        )
    return body


class AsyncTransport:
    """Asynchronous HTTP transport using httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            timeout=timeout,
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )

    async def get(self, endpoint: str, params: list[tuple[str, str]]) -> dict[str, Any]:
        """Perform one async GET request and return parsed JSON."""
        try:
            response = await self._client.get(endpoint.lstrip("/"), params=params)
        except httpx.ConnectError as exc:
            raise JolpicaConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise JolpicaTimeoutError(str(exc)) from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"{type(exc).__name__}: {exc}") from exc
        return _handle_response(response)

    async def close(self) -> None:
        await self._client.aclose()


class ResilientFetcher:
    """Retries throttled, 5xx and network failures with linear-growth backoff.

    Attempt ``n`` (zero based) that fails transiently is followed by a sleep of
    ``base_delay * (n + 1)``. After ``max_attempts`` the last transient error is
    raised. Client errors are raised on the first attempt.
    """

    def __init__(
        self,
        transport: AsyncTransport,
        max_attempts: int = 6,
        base_delay: float = 0.6,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._transport = transport
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._sleep = sleep

    async def get_json(
        self,
        endpoint: str,
        params: list[tuple[str, str]] | None = None,
    ) -> dict[str, Any]:
        attempt = 0
        while True:
            try:
                return await self._transport.get(endpoint, params or [])
            except JolpicaError as exc:
                attempt += 1
                if not exc.retryable or attempt >= self._max_attempts:
                    raise
                logger.warning(
                    "Attempt %d/%d for %s failed: %s",
                    attempt, self._max_attempts, endpoint, exc,
                )
            await self._sleep(self._base_delay * attempt)

    async def close(self) -> None:
        await self._transport.close()
