# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Core request/response types and the per-call context."""

from __future__ import annotations

import time
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any
from uuid import UUID, uuid4

import anyio
import msgspec


class CallContext(msgspec.Struct, kw_only=True, frozen=True):
    """Carries call identity and deadline through the filter chain.

    Filters can rely on it and the transport reads the remaining time as
    its timeout.

    - `attrs`: immutable mapping for caller-supplied data
    - `tracking`: mutable dict for observability data (timing, status, ...)
    """

    call_id: UUID
    deadline_s: float | None = None  # monotonic absolute deadline
    attrs: Mapping[str, Any] = msgspec.field(default_factory=lambda: MappingProxyType({}))
    tracking: dict[str, Any] = msgspec.field(default_factory=dict)

    @staticmethod
    def _current_time() -> float:
        try:
            return anyio.current_time()
        except RuntimeError:
            return time.monotonic()

    @classmethod
    def new(
        cls,
        *,
        deadline_s: float | None = None,
        attrs: Mapping[str, Any] | None = None,
        **extra_attrs: Any,
    ) -> CallContext:
        """Create new call context with generated call_id."""
        final_attrs = dict(extra_attrs)
        if attrs is not None:
            final_attrs.update(attrs)

        return cls(
            call_id=uuid4(),
            deadline_s=deadline_s,
            attrs=MappingProxyType(final_attrs),
        )

    @classmethod
    def with_timeout(cls, timeout_s: float, **kwargs: Any) -> CallContext:
        """Create call context with relative timeout."""
        return cls.new(deadline_s=cls._current_time() + timeout_s, **kwargs)

    @property
    def remaining_time(self) -> float | None:
        """Remaining time until deadline, or None if no deadline set."""
        if self.deadline_s is None:
            return None
        return max(0.0, self.deadline_s - self._current_time())


class HttpRequest(msgspec.Struct, kw_only=True):
    """Outbound request as it travels through the filter chain.

    Filters may edit headers in place or hand a replaced request downstream.
    """

    method: str
    url: str
    headers: dict[str, str] = msgspec.field(default_factory=dict)
    query: dict[str, str] = msgspec.field(default_factory=dict)
    post_params: dict[str, str] = msgspec.field(default_factory=dict)
    body: bytes | None = None
    expected_status: tuple[int, ...] = (200,)


class HttpResponse(msgspec.Struct, kw_only=True):
    """Response returned by a transport."""

    status_code: int
    headers: dict[str, str] = msgspec.field(default_factory=dict)
    body: bytes = b""
    reason: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")
