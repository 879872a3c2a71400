"""
Transport contract and its httpx binding.

A transport executes one Request and reports a NetworkServiceResult. It
never raises for network problems: timeouts and connection failures come
back as NetworkServiceFailure. Task cancellation is not caught.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import httpx
from loguru import logger

from transit_core.request.outcome import (
    NetworkServiceFailure,
    NetworkServiceResult,
    ServiceErrorKind,
    outcome_for_response,
)
from transit_core.request.request import Request
from transit_core.request.vocabulary import HeaderKey, HTTPResponse


@runtime_checkable
class Transport(Protocol):
    """Executes requests."""

    async def execute(self, request: Request) -> NetworkServiceResult:
        ...


class HttpxTransport:
    """Transport backed by httpx.AsyncClient.

    Features:
    - Connection pooling via httpx.AsyncClient
    - Cache policy sent as a Cache-Control directive
    - Transport exceptions mapped to NetworkServiceFailure

    Example:
        async with HttpxTransport() as transport:
            service = BackendService(transport)
            result = await service.execute(request)
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        max_connections: int = 100,
        max_keepalive: int = 20,
    ):
        """Initialize the transport.

        Args:
            client: Client to use. The transport creates (and closes) its own if None.
            max_connections: Maximum total connections in pool.
            max_keepalive: Maximum keepalive connections.
        """
        self._client = client
        self._owns_client = client is None
        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive,
            keepalive_expiry=30.0,
        )

    @classmethod
    def from_settings(cls, settings=None) -> "HttpxTransport":
        """Build a transport with pool limits from Settings."""
        if settings is None:
            from transit_core.config import settings

        return cls(
            max_connections=settings.HTTP_MAX_CONNECTIONS,
            max_keepalive=settings.HTTP_MAX_KEEPALIVE,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(limits=self._limits)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        """Enter async context manager."""
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context manager."""
        await self.close()

    @staticmethod
    def build_request(client: httpx.AsyncClient, request: Request) -> httpx.Request:
        """Translate a Request into an httpx.Request."""
        headers = request.raw_headers
        directive = request.cache_policy.cache_control
        if directive is not None:
            headers.setdefault(HeaderKey.CACHE_CONTROL.raw_value, directive)

        return client.build_request(
            method=request.method.value,
            url=request.url,
            headers=headers,
            content=request.body,
            timeout=request.timeout,
        )

    async def execute(self, request: Request) -> NetworkServiceResult:
        client = await self._get_client()
        method = request.method.value

        try:
            response = await client.send(self.build_request(client, request))
        except httpx.TimeoutException as e:
            logger.info(f"Timeout after {request.timeout}s for {method} {request.url}")
            return NetworkServiceFailure.transport(ServiceErrorKind.TIMED_OUT, e)
        except httpx.ConnectError as e:
            logger.info(f"Connection error for {method} {request.url}: {e}")
            return NetworkServiceFailure.transport(ServiceErrorKind.NO_INTERNET_CONNECTION, e)
        except httpx.TransportError as e:
            logger.warning(f"Transport error for {method} {request.url}: {e!r}")
            return NetworkServiceFailure.transport(ServiceErrorKind.UNKNOWN, e)
        except httpx.RequestError as e:
            # Undecodable content encoding, redirect loops
            logger.warning(f"Request error for {method} {request.url}: {e!r}")
            return NetworkServiceFailure.transport(ServiceErrorKind.UNKNOWN, e)

        return outcome_for_response(
            HTTPResponse(
                status=response.status_code,
                headers=dict(response.headers),
                body=response.content,
            )
        )
