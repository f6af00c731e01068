# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Wire-level constants shared by the request builders."""

from __future__ import annotations

# Metadata
X_MS_META_HEADER_PREFIX = "x-ms-meta-"

# Service headers
X_MS_VERSION = "x-ms-version"
X_MS_DATE = "x-ms-date"
STORAGE_API_LATEST_VERSION = "2011-08-18"

# Conditional request headers
IF_MATCH = "If-Match"
IF_NONE_MATCH = "If-None-Match"
IF_MODIFIED_SINCE = "If-Modified-Since"
IF_UNMODIFIED_SINCE = "If-Unmodified-Since"

# Conditional headers for copy sources
X_MS_SOURCE_IF_MATCH = "x-ms-source-if-match"
X_MS_SOURCE_IF_NONE_MATCH = "x-ms-source-if-none-match"
X_MS_SOURCE_IF_MODIFIED_SINCE = "x-ms-source-if-modified-since"
X_MS_SOURCE_IF_UNMODIFIED_SINCE = "x-ms-source-if-unmodified-since"

SOURCE_CONDITION_HEADERS = {
    IF_MATCH: X_MS_SOURCE_IF_MATCH,
    IF_NONE_MATCH: X_MS_SOURCE_IF_NONE_MATCH,
    IF_MODIFIED_SINCE: X_MS_SOURCE_IF_MODIFIED_SINCE,
    IF_UNMODIFIED_SINCE: X_MS_SOURCE_IF_UNMODIFIED_SINCE,
}

# HTTP methods
HTTP_GET = "GET"
HTTP_PUT = "PUT"
HTTP_DELETE = "DELETE"

# Endpoints
SERVICE_HOST_SUFFIX = "core.windows.net"
SERVICE_NAMES = ("blob", "queue", "table")
