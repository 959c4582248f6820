# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
jfrogkit package entrypoint.

Client-side integration with an artifact repository (build-info publishing)
and a software-composition security scanner (dependency graph scans with
asynchronous result polling). HTTP behavior is abstracted behind an injectable
client interface, and domain objects are modeled with typed dataclasses.
"""

from .artifactory import BuildInfoService
from .config import HttpSettings, ScanSettings, ServiceDetails, load_http_settings, load_scan_settings
from .errors import DecodeError, JfrogKitError, ScanTimeoutError, StatusError, TransportError
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    RetryConfig,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .models import BuildInfo, GraphNode, ScanRequest, ScanResult, Sha256Summary
from .runtime import JfrogKit
from .version import __version__
from .xray import PollState, ResultPoller, ScanService

__all__ = [
    "BuildInfo",
    "BuildInfoService",
    "DecodeError",
    "GraphNode",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "JfrogKit",
    "JfrogKitError",
    "PollState",
    "ResultPoller",
    "RetryConfig",
    "ScanRequest",
    "ScanResult",
    "ScanService",
    "ScanSettings",
    "ScanTimeoutError",
    "ServiceDetails",
    "Sha256Summary",
    "StatusError",
    "StubHttpClient",
    "TransportError",
    "create_default_http_client",
    "load_http_settings",
    "load_scan_settings",
    "setup_logging",
    "__version__",
]
