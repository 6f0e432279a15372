"""HttpNumberProvider -- upstream number generators over HTTP via httpx.

Derived kinds POST the current window as {"numbers": [...]}; the random
kind is a plain GET. Every failure (network, status, timeout, body) maps
to an empty list and a warning log entry; cancellation propagates.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Self

import httpx
import structlog

from avgcalc.providers.errors import (
    MalformedResponseError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderNotConnectedError,
    ProviderTimeoutError,
    UpstreamUnavailable,
)
from avgcalc.providers.http.parsing import parse_numbers
from avgcalc.providers.types import NumberKind

if TYPE_CHECKING:
    from avgcalc.config import ProviderConfig

logger = structlog.get_logger()

# Max chars of an error body kept in logs
_BODY_SNIPPET_LEN = 100


class HttpNumberProvider:
    """NumberProvider implementation backed by a pooled httpx.AsyncClient.

    Args:
        config: Provider settings (base_url, timeout_seconds, bearer_token).
        transport: Optional httpx transport, used by tests to stub upstreams.
    """

    def __init__(
        self,
        config: ProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url: str = config.base_url.rstrip("/")
        self._timeout: float = config.timeout_seconds
        self._bearer_token: str = config.bearer_token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._lifecycle_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def url_for(self, kind: NumberKind) -> str:
        return f"{self._base_url}/{kind.value}"

    async def connect(self) -> None:
        async with self._lifecycle_lock:
            if self._client is not None:
                logger.warning("HttpNumberProvider already connected")
                return

            headers = {"Accept": "application/json"}
            if self._bearer_token:
                headers["Authorization"] = f"Bearer {self._bearer_token}"

            self._client = httpx.AsyncClient(
                headers=headers,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
            logger.info(
                "HttpNumberProvider connected",
                base_url=self._base_url,
                timeout_seconds=self._timeout,
            )

    async def disconnect(self) -> None:
        async with self._lifecycle_lock:
            if self._client is None:
                return
            await self._client.aclose()
            self._client = None
            logger.info("HttpNumberProvider disconnected")

    async def fetch(
        self,
        kind: NumberKind,
        window: list[int] | None = None,
    ) -> list[int]:
        """Fetch numbers for a kind, or an empty list on upstream failure.

        Raises:
            ProviderNotConnectedError: If connect() has not been called.
        """
        if self._client is None:
            raise ProviderNotConnectedError(
                "HttpNumberProvider.fetch() called before connect()"
            )

        url = self.url_for(kind)
        try:
            # httpx timeouts are per phase; bound the whole call as well
            return await asyncio.wait_for(
                self._request(self._client, kind, url, window or []),
                timeout=self._timeout,
            )
        except TimeoutError:
            error: UpstreamUnavailable = ProviderTimeoutError(
                f"no response within {self._timeout}s"
            )
        except UpstreamUnavailable as e:
            error = e

        logger.warning(
            "provider_fetch_failed",
            kind=kind.value,
            url=url,
            error_type=type(error).__name__,
            error=str(error),
        )
        return []

    async def _request(
        self,
        client: httpx.AsyncClient,
        kind: NumberKind,
        url: str,
        window: list[int],
    ) -> list[int]:
        try:
            if kind.is_derived:
                response = await client.post(url, json={"numbers": window})
            else:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(str(e) or type(e).__name__) from e
        except httpx.HTTPError as e:
            raise ProviderConnectionError(str(e) or type(e).__name__) from e

        if not response.is_success:
            raise ProviderAPIError(
                response.status_code,
                response.text[:_BODY_SNIPPET_LEN],
            )

        # JSONDecodeError, UnicodeDecodeError and the int digit limit are all
        # ValueError; deep nesting overflows the decoder
        try:
            payload = response.json()
        except (ValueError, RecursionError) as e:
            raise MalformedResponseError(f"invalid JSON body: {e}") from e

        numbers = parse_numbers(payload)
        logger.debug(
            "provider_fetch_succeeded",
            kind=kind.value,
            count=len(numbers),
        )
        return numbers

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        await self.disconnect()
