# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Configuration for all tests - asyncio backend only."""

import pytest

# Ensure AnyIO's pytest plugin is loaded explicitly (even if autoload is disabled)
pytest_plugins = ("anyio",)


@pytest.fixture(scope="session")
def anyio_backend():
    """Force tests to run only on asyncio backend."""
    return "asyncio"
