# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Error hierarchy for the restproxy service layer.

Errors carry a behavioral classification (retryable or not), a
machine-readable code and structured context for logging. Higher layers
decide whether to retry; nothing here retries on its own.
"""

from __future__ import annotations

from typing import Any, ClassVar

__all__ = (
    "INVALID_METADATA_MSG",
    "RestProxyError",
    "RetryableError",
    "NonRetryableError",
    "TimeoutError",
    "TransportError",
    "RateLimitError",
    "SerializationError",
    "InvalidArgumentError",
)

INVALID_METADATA_MSG = "Metadata cannot contain newline characters."


class RestProxyError(Exception):
    """Base for all restproxy errors.

    Provides:
    - Behavioral classification (retryable/non-retryable)
    - Machine-readable error codes
    - Structured context for logging/monitoring
    """

    default_message: ClassVar[str] = "restproxy error"
    default_status_code: ClassVar[int] = 500
    retryable: ClassVar[bool] = False
    code: ClassVar[str] = "restproxy_error"
    severity: ClassVar[str] = "error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message or self.default_message)
        if cause:
            self.__cause__ = cause
        self.message = message or self.default_message
        self.details = details or {}
        self.status_code = status_code or type(self).default_status_code
        self.context = context or {}

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        """Serialize error to a structured dictionary for logging."""
        data = {
            "error": self.__class__.__name__,
            "code": type(self).code,
            "message": self.message,
            "status_code": self.status_code,
            "retryable": type(self).retryable,
            "severity": type(self).severity,
            **({"details": self.details} if self.details else {}),
            **({"context": self.context} if self.context else {}),
        }
        if include_cause and (cause := self.__cause__):
            data["cause"] = repr(cause)
        return data

    @classmethod
    def from_value(
        cls,
        value: Any,
        *,
        expected: str | None = None,
        message: str | None = None,
        cause: Exception | None = None,
        **extra: Any,
    ):
        """Create error describing an offending value."""
        details = {
            "value": value,
            "type": type(value).__name__,
            **({"expected": expected} if expected else {}),
            **extra,
        }
        return cls(message=message, details=details, cause=cause)


class RetryableError(RestProxyError):
    """Error that can be retried (5xx, network, rate limits, timeouts)."""

    retryable = True
    severity = "warning"
    code = "retryable_error"


class NonRetryableError(RestProxyError):
    """Error that should not be retried (4xx except 429, invalid input)."""

    retryable = False
    code = "non_retryable_error"


class TimeoutError(RetryableError):
    """Operation exceeded its deadline."""

    default_status_code = 504
    code = "timeout"


class TransportError(RetryableError):
    """Transport-level failure (network, HTTP, parsing)."""

    code = "transport_error"

    def __init__(self, message: str, status_code: int | None = None, **kwargs):
        super().__init__(message, status_code=status_code, **kwargs)


class RateLimitError(RetryableError):
    """Server throttled the request."""

    default_message = "Rate limit exceeded"
    default_status_code = 429
    code = "rate_limited"

    def __init__(self, retry_after: float, **kwargs):
        super().__init__(**kwargs)
        self.retry_after = retry_after


class SerializationError(NonRetryableError):
    """Body could not be encoded or decoded."""

    default_message = "Serialization failed"
    default_status_code = 422
    code = "serialization_failed"


class InvalidArgumentError(NonRetryableError, ValueError):
    """Caller supplied an argument that violates a request-building rule."""

    default_message = "Invalid argument"
    default_status_code = 400
    code = "invalid_argument"
