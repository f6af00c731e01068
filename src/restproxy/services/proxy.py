# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Service proxy: immutable transport configuration plus request shaping."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Any

import anyio

from restproxy import errors as _err
from restproxy import resources

from .access_condition import AccessCondition
from .core import CallContext, HttpRequest, HttpResponse
from .filters import DateFilter, Filter, HeadersFilter
from .serialization import Serializer, XmlSerializer
from .transport import HTTPXTransport, Transport

if TYPE_CHECKING:
    from restproxy.settings import ProxySettings, ServiceName

logger = logging.getLogger(__name__)

_ILLEGAL_METADATA_CHARS = ("\r", "\n")


@dataclass(frozen=True, slots=True)
class ServiceProxy:
    """Base for storage service clients.

    Holds the transport, endpoint, account name, serializer and an ordered
    tuple of filters. Instances never change after construction;
    ``with_filter`` hands back a new proxy, so a proxy can be shared freely
    between tasks and derived from concurrently.

    Filters run in attachment order around the transport call: the first
    attached filter is outermost and the transport is innermost.
    """

    transport: Transport
    uri: str
    account_name: str
    serializer: Serializer
    filters: tuple[Filter, ...] = ()

    def __post_init__(self):
        for name in ("transport", "uri", "account_name", "serializer"):
            if getattr(self, name) is None:
                raise _err.InvalidArgumentError(f"{name} is required")
        # Callers may pass any iterable; store a tuple so the chain stays fixed.
        if not isinstance(self.filters, tuple):
            object.__setattr__(self, "filters", tuple(self.filters))

    @classmethod
    def from_settings(
        cls,
        settings: ProxySettings,
        *,
        service: ServiceName = "blob",
        transport: Transport | None = None,
        serializer: Serializer | None = None,
    ) -> ServiceProxy:
        """Build a proxy for ``service`` with version and date headers attached."""
        if transport is None:
            transport = HTTPXTransport(
                verify_ssl=settings.VERIFY_SSL,
                follow_redirects=settings.FOLLOW_REDIRECTS,
                max_connections=settings.MAX_CONNECTIONS,
                default_timeout_s=settings.TIMEOUT_S,
            )
        proxy = cls(
            transport=transport,
            uri=settings.endpoint_for(service),
            account_name=settings.ACCOUNT_NAME,
            serializer=serializer or XmlSerializer(),
        )
        return proxy.with_filter(
            HeadersFilter({resources.X_MS_VERSION: settings.API_VERSION})
        ).with_filter(DateFilter())

    def with_filter(self, filter: Filter) -> ServiceProxy:
        """Return a new proxy with ``filter`` appended to the chain."""
        return dataclasses.replace(self, filters=(*self.filters, filter))

    # Dispatch

    async def send(
        self,
        method: str,
        headers: Mapping[str, str] | None = None,
        query_params: Mapping[str, str] | None = None,
        post_params: Mapping[str, str] | None = None,
        path: str | None = None,
        expected_status: int | Iterable[int] = 200,
        body: bytes | None = None,
        *,
        ctx: CallContext | None = None,
    ) -> HttpResponse:
        """Send a request through the filter chain and check its status.

        Args:
            method: HTTP method.
            headers: Request headers.
            query_params: Query string parameters.
            post_params: Form parameters; sent url-encoded in place of ``body``.
            path: Resource path appended to the proxy URI.
            expected_status: Status code, or codes, that count as success.
            body: Raw request body.
            ctx: Call context; a fresh one is created when omitted.

        Raises:
            RateLimitError: 429 when not expected.
            RetryableError: unexpected 5xx.
            NonRetryableError: unexpected 4xx.
            TransportError: any other unexpected status.
            TimeoutError: the context deadline passed.
        """
        if ctx is None:
            ctx = CallContext.new()
        if isinstance(expected_status, int):
            expected_status = (expected_status,)

        request = HttpRequest(
            method=method,
            url=self._build_url(path),
            headers=dict(headers or {}),
            query=dict(query_params or {}),
            post_params=dict(post_params or {}),
            body=body,
            expected_status=tuple(expected_status),
        )

        async def invoke(i: int, req: HttpRequest) -> HttpResponse:
            if i >= len(self.filters):
                return await self.transport.send(req, timeout_s=ctx.remaining_time)
            return await self.filters[i](req, ctx, lambda r: invoke(i + 1, r))

        logger.debug(
            "Dispatching request",
            extra={
                "call_id": str(ctx.call_id),
                "method": method,
                "url": request.url,
                "filter_count": len(self.filters),
            },
        )

        if ctx.deadline_s is None:
            response = await invoke(0, request)
        else:
            with anyio.move_on_after(ctx.remaining_time) as scope:
                response = await invoke(0, request)
            if scope.cancelled_caught:
                raise _err.TimeoutError(
                    f"{method} {request.url} exceeded its deadline",
                    context={"call_id": str(ctx.call_id), "url": request.url},
                )

        self._check_response_status(response, request)
        return response

    def _build_url(self, path: str | None) -> str:
        if not path:
            return self.uri
        return f"{self.uri.rstrip('/')}/{path.lstrip('/')}"

    def _check_response_status(self, response: HttpResponse, request: HttpRequest) -> None:
        if response.status_code in request.expected_status:
            return

        base_context = {
            "status_code": response.status_code,
            "expected_status": list(request.expected_status),
            "method": request.method,
            "url": request.url,
        }

        response_preview = response.text[:500]
        if len(response.body) > 500:
            response_preview += "... [truncated]"
        context = {**base_context, "response_preview": response_preview}

        if response.status_code == 429:
            retry_after = _parse_retry_after(
                next((v for k, v in response.headers.items() if k.lower() == "retry-after"), None)
            )
            raise _err.RateLimitError(
                retry_after=retry_after,
                message=f"Rate limited: {response.status_code}",
                context={**context, "retry_after": retry_after},
            )
        elif 500 <= response.status_code < 600:
            raise _err.RetryableError(
                f"Server error: {response.status_code} {response.reason}",
                status_code=response.status_code,
                context=context,
            )
        elif 400 <= response.status_code < 500:
            raise _err.NonRetryableError(
                f"Client error: {response.status_code} {response.reason}",
                status_code=response.status_code,
                context=context,
            )
        else:
            raise _err.TransportError(
                f"Unexpected status: {response.status_code} {response.reason}",
                status_code=response.status_code,
                context=context,
            )

    # Header and parameter shaping

    def generate_metadata_headers(self, metadata: Mapping[str, str]) -> dict[str, str]:
        """Turn user metadata into ``x-ms-meta-`` headers.

        Keys are lowercased; values are copied as-is.

        Raises:
            InvalidArgumentError: a value contains ``\\r`` or ``\\n``. Nothing
                is returned in that case, not even the valid entries.
        """
        headers = {}
        for key, value in metadata.items():
            if any(char in value for char in _ILLEGAL_METADATA_CHARS):
                raise _err.InvalidArgumentError(
                    _err.INVALID_METADATA_MSG, details={"key": key}
                )
            headers[resources.X_MS_META_HEADER_PREFIX + key.lower()] = value
        return headers

    def add_metadata_headers(
        self, headers: Mapping[str, str], metadata: Mapping[str, str] | None
    ) -> dict[str, str]:
        result = dict(headers)
        if metadata:
            result.update(self.generate_metadata_headers(metadata))
        return result

    def get_metadata_array(self, headers: Mapping[str, str]) -> dict[str, str]:
        """Collect metadata from ``x-ms-meta-`` headers, prefix stripped.

        The prefix match ignores case; the remainder of the key is kept as
        received. Other headers are skipped.
        """
        prefix = resources.X_MS_META_HEADER_PREFIX
        return {
            key[len(prefix) :]: value
            for key, value in headers.items()
            if key.lower().startswith(prefix)
        }

    def add_optional_access_condition_header(
        self, headers: Mapping[str, str], access_condition: AccessCondition | None
    ) -> dict[str, str]:
        """Copy ``headers`` and set the condition's header, if any.

        An existing header of the same name is overwritten.
        """
        if access_condition is None or access_condition.is_none:
            return dict(headers)
        return _set_header(headers, access_condition.header, access_condition.formatted_value())

    def add_optional_source_access_condition_header(
        self, headers: Mapping[str, str], access_condition: AccessCondition | None
    ) -> dict[str, str]:
        """Like ``add_optional_access_condition_header`` for a copy source."""
        if access_condition is None or access_condition.is_none:
            return dict(headers)
        header = resources.SOURCE_CONDITION_HEADERS[access_condition.header]
        return _set_header(headers, header, access_condition.formatted_value())

    def group_query_values(self, values: Iterable[str | None]) -> str:
        """Comma-join values, dropping None and empty strings."""
        return ",".join(value for value in values if value)

    def add_post_parameter(
        self, post_params: Mapping[str, str], key: str, value: str
    ) -> dict[str, str]:
        result = dict(post_params)
        result[key] = value
        return result

    def add_optional_query_param(
        self, query_params: Mapping[str, str], key: str, value: Any
    ) -> dict[str, str]:
        return _add_if_present(query_params, key, value)

    def add_optional_header(
        self, headers: Mapping[str, str], key: str, value: Any
    ) -> dict[str, str]:
        if value is None or value == "":
            return dict(headers)
        return _set_header(headers, key, str(value))


def _add_if_present(mapping: Mapping[str, str], key: str, value: Any) -> dict[str, str]:
    result = dict(mapping)
    if value is not None and value != "":
        result[key] = str(value)
    return result


def _set_header(headers: Mapping[str, str], name: str, value: str) -> dict[str, str]:
    """Copy ``headers`` with ``name`` set, replacing it under any casing."""
    lowered = name.lower()
    result = {k: v for k, v in headers.items() if k.lower() != lowered}
    result[name] = value
    return result


def _parse_retry_after(value: str | None, default: float = 60.0) -> float:
    """Seconds to wait from a Retry-After value: delay-seconds or an HTTP-date."""
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return default
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())
