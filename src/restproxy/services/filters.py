# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Filters wrapping the transport call of a service proxy."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime, timezone
from typing import Any, Protocol

from restproxy import resources

from .access_condition import format_http_date
from .core import CallContext, HttpRequest, HttpResponse

NextCall = Callable[[HttpRequest], Awaitable[HttpResponse]]

logger = logging.getLogger(__name__)


class Filter(Protocol):
    """Request/response interceptor.

    Receives the request, the call context and the downstream link. It may
    edit the request before awaiting ``next_call`` and inspect or replace
    the response afterwards. Filters keep no per-proxy state, so one
    instance can be attached to any number of proxies.
    """

    async def __call__(
        self, request: HttpRequest, ctx: CallContext, next_call: NextCall
    ) -> HttpResponse: ...


class HeadersFilter:
    """Adds fixed headers the request does not already carry."""

    def __init__(self, headers: Mapping[str, str]):
        self.headers = dict(headers)

    async def __call__(
        self, request: HttpRequest, ctx: CallContext, next_call: NextCall
    ) -> HttpResponse:
        present = {name.lower() for name in request.headers}
        for name, value in self.headers.items():
            if name.lower() not in present:
                request.headers[name] = value
        return await next_call(request)


class DateFilter:
    """Stamps the request with the current time in ``x-ms-date``."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def __call__(
        self, request: HttpRequest, ctx: CallContext, next_call: NextCall
    ) -> HttpResponse:
        request.headers[resources.X_MS_DATE] = format_http_date(self.clock())
        return await next_call(request)


class LoggingFilter:
    """Logs each call with latency and status, redacting sensitive headers."""

    SENSITIVE_HEADERS = {
        "authorization",
        "x-api-key",
        "api-key",
        "x-auth-token",
    }

    def __init__(self, *, logger_name: str = __name__):
        self.logger = logging.getLogger(logger_name)

    async def __call__(
        self, request: HttpRequest, ctx: CallContext, next_call: NextCall
    ) -> HttpResponse:
        self.logger.debug(
            "Service request starting",
            extra={
                "call_id": str(ctx.call_id),
                "method": request.method,
                "url": request.url,
                "headers": self._redact(request.headers),
            },
        )
        start_time = time.perf_counter()

        try:
            response = await next_call(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            ctx.tracking["duration_s"] = duration
            self.logger.error(
                "Service request failed",
                extra={
                    "call_id": str(ctx.call_id),
                    "method": request.method,
                    "url": request.url,
                    "duration_s": duration,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            raise

        duration = time.perf_counter() - start_time
        ctx.tracking["duration_s"] = duration
        ctx.tracking["status_code"] = response.status_code
        self.logger.info(
            "Service request completed",
            extra={
                "call_id": str(ctx.call_id),
                "method": request.method,
                "url": request.url,
                "duration_s": duration,
                "status_code": response.status_code,
            },
        )
        return response

    def _redact(self, headers: Mapping[str, Any]) -> dict[str, Any]:
        return {
            name: "[REDACTED]" if self._is_sensitive(name) else value
            for name, value in headers.items()
        }

    def _is_sensitive(self, name: str) -> bool:
        name_lower = name.lower()
        return (
            name_lower in self.SENSITIVE_HEADERS
            or "key" in name_lower
            or "secret" in name_lower
            or "token" in name_lower
            or "password" in name_lower
        )
