# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Environment settings for building service proxies, via pydantic-settings."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from restproxy import errors as _err
from restproxy import resources

logger = logging.getLogger(__name__)

ServiceName = Literal["blob", "queue", "table"]


class ProxySettings(BaseSettings, frozen=True):
    """Account identity, endpoints and transport defaults.

    Every field can be set through a ``RESTPROXY_``-prefixed environment
    variable or a ``.env`` file, e.g. ``RESTPROXY_ACCOUNT_NAME=myaccount``.
    """

    model_config = SettingsConfigDict(
        env_prefix="RESTPROXY_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Account
    ACCOUNT_NAME: str | None = None
    ACCOUNT_KEY: SecretStr | None = None  # kept for signing layers; never logged

    # Endpoints; derived from the account name when unset
    BLOB_ENDPOINT: str | None = None
    QUEUE_ENDPOINT: str | None = None
    TABLE_ENDPOINT: str | None = None
    DEFAULT_PROTOCOL: Literal["http", "https"] = "https"

    API_VERSION: str = resources.STORAGE_API_LATEST_VERSION

    # Transport
    TIMEOUT_S: float | None = 30.0
    VERIFY_SSL: bool = True
    FOLLOW_REDIRECTS: bool = False
    MAX_CONNECTIONS: int = 100

    def endpoint_for(self, service: ServiceName) -> str:
        """Endpoint URI for ``service``: explicit setting first, then derived."""
        if service not in resources.SERVICE_NAMES:
            raise _err.InvalidArgumentError.from_value(
                service,
                expected="one of " + ", ".join(resources.SERVICE_NAMES),
                message=f"Unknown service: {service!r}",
            )

        explicit = getattr(self, f"{service.upper()}_ENDPOINT")
        if explicit:
            return explicit

        if not self.ACCOUNT_NAME:
            raise _err.InvalidArgumentError(
                f"No {service} endpoint configured and no account name to derive one from"
            )
        endpoint = (
            f"{self.DEFAULT_PROTOCOL}://{self.ACCOUNT_NAME}.{service}.{resources.SERVICE_HOST_SUFFIX}"
        )
        logger.debug(f"Derived {service} endpoint {endpoint}")
        return endpoint
