# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from . import errors, resources
from .services import AccessCondition, CallContext, ServiceProxy
from .settings import ProxySettings

__version__ = "0.1.0"

__all__ = (
    "errors",
    "resources",
    "AccessCondition",
    "CallContext",
    "ServiceProxy",
    "ProxySettings",
    "__version__",
)
