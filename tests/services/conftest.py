# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for service proxy tests."""

from __future__ import annotations

import pytest

from tests.utils import ProxyMockFactory, RecordingTransport


@pytest.fixture
def call_log() -> list:
    return []


@pytest.fixture
def proxy_and_transport(call_log):
    return ProxyMockFactory.create_proxy(log=call_log)


@pytest.fixture
def proxy(proxy_and_transport):
    return proxy_and_transport[0]


@pytest.fixture
def transport(proxy_and_transport) -> RecordingTransport:
    return proxy_and_transport[1]
