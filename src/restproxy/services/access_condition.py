# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Optimistic-concurrency preconditions expressed as conditional headers."""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any

import msgspec

from restproxy import errors as _err
from restproxy import resources

VALID_HEADERS = frozenset(
    {
        "",
        resources.IF_MATCH,
        resources.IF_NONE_MATCH,
        resources.IF_MODIFIED_SINCE,
        resources.IF_UNMODIFIED_SINCE,
    }
)


def format_http_date(value: datetime) -> str:
    """Format as an RFC 1123 HTTP-date in GMT. Naive datetimes are UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


class AccessCondition(msgspec.Struct, frozen=True):
    """A single precondition: header name plus ETag or timestamp.

    Use the constructors rather than building one directly::

        AccessCondition.if_match("0x8CAFB82EFF70C46")
        AccessCondition.if_unmodified_since(last_seen)
    """

    header: str = ""
    value: Any = None  # ETag string or datetime

    def __post_init__(self):
        if self.header not in VALID_HEADERS:
            raise _err.InvalidArgumentError.from_value(
                self.header,
                expected="one of " + ", ".join(sorted(h for h in VALID_HEADERS if h)),
                message=f"Invalid access condition header: {self.header!r}",
            )

    @classmethod
    def none(cls) -> AccessCondition:
        return cls()

    @classmethod
    def if_match(cls, etag: str) -> AccessCondition:
        return cls(resources.IF_MATCH, etag)

    @classmethod
    def if_none_match(cls, etag: str) -> AccessCondition:
        return cls(resources.IF_NONE_MATCH, etag)

    @classmethod
    def if_modified_since(cls, last_modified: datetime) -> AccessCondition:
        return cls(resources.IF_MODIFIED_SINCE, last_modified)

    @classmethod
    def if_unmodified_since(cls, last_modified: datetime) -> AccessCondition:
        return cls(resources.IF_UNMODIFIED_SINCE, last_modified)

    @property
    def is_none(self) -> bool:
        return not self.header

    def formatted_value(self) -> str:
        """Header value as sent on the wire."""
        if isinstance(self.value, datetime):
            return format_http_date(self.value)
        return "" if self.value is None else str(self.value)
