# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""
Test doubles for the service proxy.

Usage Examples:
    # Proxy over a recording transport
    proxy, transport = ProxyMockFactory.create_proxy()

    # Transport replaying canned responses
    transport = RecordingTransport([ProxyMockFactory.create_response(404)])
"""

from __future__ import annotations

from restproxy.services import (
    CallContext,
    HttpRequest,
    HttpResponse,
    ServiceProxy,
    XmlSerializer,
)


class RecordingTransport:
    """Transport double that records requests and replays canned responses."""

    def __init__(self, responses: list[HttpResponse] | None = None, *, log: list | None = None):
        self.responses = list(responses or [])
        self.requests: list[HttpRequest] = []
        self.timeouts: list[float | None] = []
        self.log = log if log is not None else []

    async def send(self, request: HttpRequest, *, timeout_s: float | None) -> HttpResponse:
        self.requests.append(request)
        self.timeouts.append(timeout_s)
        self.log.append("transport")
        if self.responses:
            return self.responses.pop(0)
        return ProxyMockFactory.create_response()


class SimpleFilter:
    """Filter that sets one header and records when it runs."""

    def __init__(self, name: str, value: str, *, log: list | None = None):
        self.name = name
        self.value = value
        self.log = log if log is not None else []

    async def __call__(self, request: HttpRequest, ctx: CallContext, next_call):
        self.log.append(f"{self.value}:in")
        request.headers[self.name] = self.value
        response = await next_call(request)
        self.log.append(f"{self.value}:out")
        return response


class ProxyMockFactory:
    """Factory for standard proxies and responses used across the tests."""

    @staticmethod
    def create_response(
        status_code: int = 200,
        body: bytes = b"ok",
        headers: dict[str, str] | None = None,
        reason: str = "OK",
    ) -> HttpResponse:
        return HttpResponse(
            status_code=status_code, body=body, headers=headers or {}, reason=reason
        )

    @staticmethod
    def create_proxy(
        responses: list[HttpResponse] | None = None,
        *,
        uri: str = "http://www.microsoft.com",
        account_name: str = "myaccount",
        log: list | None = None,
    ) -> tuple[ServiceProxy, RecordingTransport]:
        transport = RecordingTransport(responses, log=log)
        proxy = ServiceProxy(
            transport=transport,
            uri=uri,
            account_name=account_name,
            serializer=XmlSerializer(),
        )
        return proxy, transport
