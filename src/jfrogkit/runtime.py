# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level jfrogkit facade for scan and build-info workflows."""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import suppress

from .artifactory.buildinfo import BuildInfoService
from .config import HttpSettings, ScanSettings, ServiceDetails, load_http_settings, load_scan_settings
from .http.client import HttpClient, create_default_http_client
from .models import BuildInfo, BuildInfoParams, GraphNode, PublishedBuildInfo, ScanRequest, ScanResult, Sha256Summary
from .xray.scan import ScanService


class JfrogKit:
    """
    Convenience wrapper that wires one HTTP client into both service clients.

    Service details are passed in explicitly; when omitted they are read from
    ``JFROGKIT_XRAY_URL`` / ``JFROGKIT_ARTIFACTORY_URL`` and the shared
    credential variables.
    """

    def __init__(
        self,
        *,
        xray: ServiceDetails | None = None,
        artifactory: ServiceDetails | None = None,
        http_client: HttpClient | None = None,
        http_settings: HttpSettings | None = None,
        scan_settings: ScanSettings | None = None,
        dry_run: bool = False,
    ):
        self.http_settings = http_settings or load_http_settings()
        self.scan_settings = scan_settings or load_scan_settings()
        self.http_client = http_client or create_default_http_client(self.http_settings)
        self.scan_service = ScanService(
            xray or ServiceDetails.from_env("XRAY"),
            self.http_client,
            settings=self.http_settings,
            scan_settings=self.scan_settings,
        )
        self.build_info_service = BuildInfoService(
            artifactory or ServiceDetails.from_env("ARTIFACTORY"),
            self.http_client,
            dry_run=dry_run,
            settings=self.http_settings,
        )

    def scan_graph(
        self,
        graph: GraphNode,
        *,
        project_key: str | None = None,
        repo_path: str | None = None,
        watches: Sequence[str] | None = None,
        include_vulnerabilities: bool = False,
        include_licenses: bool = False,
        max_wait: float | None = None,
    ) -> ScanResult:
        request = ScanRequest.create(graph, project_key=project_key, repo_path=repo_path, watches=watches)
        return self.scan_service.scan(
            request,
            include_vulnerabilities=include_vulnerabilities,
            include_licenses=include_licenses,
            max_wait=max_wait,
        )

    def publish_build_info(self, build: BuildInfo, project_key: str = "") -> Sha256Summary:
        return self.build_info_service.publish_build_info(build, project_key)

    def get_build_info(self, name: str, number: str, project_key: str = "") -> tuple[PublishedBuildInfo | None, bool]:
        return self.build_info_service.get_build_info(BuildInfoParams(name, number, project_key))

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> JfrogKit:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
