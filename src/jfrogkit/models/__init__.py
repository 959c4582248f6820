# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for jfrogkit."""

from ..http.models import Headers, HttpRequest, HttpResponse, RetryConfig
from .buildinfo import BuildInfo, BuildInfoParams, Module, PublishedBuildInfo, Sha256Summary
from .graph import GraphNode
from .scan import (
    Component,
    Cve,
    ImpactPathNode,
    License,
    ProjectSelection,
    RepoPathSelection,
    ScanRequest,
    ScanResult,
    ScanSelection,
    Violation,
    Vulnerability,
    WatchesSelection,
)

__all__ = [
    "BuildInfo",
    "BuildInfoParams",
    "Component",
    "Cve",
    "GraphNode",
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "ImpactPathNode",
    "License",
    "Module",
    "ProjectSelection",
    "PublishedBuildInfo",
    "RepoPathSelection",
    "RetryConfig",
    "ScanRequest",
    "ScanResult",
    "ScanSelection",
    "Sha256Summary",
    "Violation",
    "Vulnerability",
    "WatchesSelection",
]
