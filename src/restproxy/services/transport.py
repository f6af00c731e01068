# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Transport protocol for the HTTP IO boundary."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from restproxy import errors as _err

from .core import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """IO boundary for HTTP requests.

    Thin and swappable. All IO happens here; connection pooling, SSL and
    timeouts are the transport's own business. Transports do not judge
    status codes, the proxy checks them against the expected set.
    """

    async def send(self, request: HttpRequest, *, timeout_s: float | None) -> HttpResponse:
        """Send request and return the raw response."""
        ...


class HTTPXTransport:
    """HTTPX-based transport implementation."""

    def __init__(
        self,
        *,
        verify_ssl: bool = True,
        follow_redirects: bool = False,
        max_connections: int = 100,
        max_keepalive_connections: int = 20,
        default_timeout_s: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.default_timeout_s = default_timeout_s
        self._client = client or httpx.AsyncClient(
            verify=verify_ssl,
            follow_redirects=follow_redirects,
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max_keepalive_connections,
            ),
        )

    async def __aenter__(self):
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self._client.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def send(self, request: HttpRequest, *, timeout_s: float | None) -> HttpResponse:
        """Send request and return the response, whatever its status.

        Without a call deadline the transport's ``default_timeout_s`` applies.
        """
        if timeout_s is None:
            timeout_s = self.default_timeout_s
        # Form parameters take the body slot; httpx sets the content type.
        content = None if request.post_params else request.body
        data = request.post_params or None

        try:
            response = await self._client.request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                params=request.query or None,
                content=content,
                data=data,
                timeout=timeout_s,
            )
        except httpx.TimeoutException as e:
            raise _err.TransportError(
                f"Request timed out: {e}",
                context={"method": request.method, "url": request.url, "timeout_s": timeout_s},
                cause=e,
            )
        except httpx.NetworkError as e:
            raise _err.RetryableError(
                f"Network error: {e}",
                context={"method": request.method, "url": request.url},
                cause=e,
            )

        logger.debug(
            "Transport received response",
            extra={
                "method": request.method,
                "url": request.url,
                "status_code": response.status_code,
            },
        )

        return HttpResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
            reason=response.reason_phrase,
        )
