# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""
restproxy testing utilities.

Shared test doubles for transports, filters and proxies.
"""

from .mock_factory import ProxyMockFactory, RecordingTransport, SimpleFilter

__all__ = [
    "ProxyMockFactory",
    "RecordingTransport",
    "SimpleFilter",
]
