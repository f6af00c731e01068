# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""restproxy services module exports."""

from .access_condition import AccessCondition
from .core import CallContext, HttpRequest, HttpResponse
from .filters import DateFilter, Filter, HeadersFilter, LoggingFilter
from .proxy import ServiceProxy
from .serialization import JsonSerializer, Serializer, XmlSerializer
from .transport import HTTPXTransport, Transport

__all__ = [
    # Core types
    "CallContext",
    "HttpRequest",
    "HttpResponse",
    "AccessCondition",
    "ServiceProxy",
    # Filters
    "Filter",
    "HeadersFilter",
    "DateFilter",
    "LoggingFilter",
    # Collaborators
    "Transport",
    "HTTPXTransport",
    "Serializer",
    "XmlSerializer",
    "JsonSerializer",
]
