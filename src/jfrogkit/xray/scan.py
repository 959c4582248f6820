# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Graph scan client: submit a dependency graph and collect its results."""

from __future__ import annotations

import json
import logging
from contextlib import suppress

from ..config import HttpSettings, ScanSettings, ServiceDetails, load_http_settings, load_scan_settings
from ..http.client import HttpClient, create_default_http_client
from ..http.models import HttpRequest, HttpResponse, RetryConfig
from ..http.retry import send_with_retries
from ..http.url import build_url, path_segment
from ..http.utils import check_status
from ..models.scan import ScanRequest, ScanResult
from .decode import decode_scan_id, decode_scan_response
from .poller import ResultPoller

logger = logging.getLogger(__name__)

SCAN_GRAPH_API = "api/v1/scan/graph"


class ScanService:
    """Submits scan graphs and waits for their results.

    Every call issues single attempts: transport errors, unexpected statuses and
    undecodable bodies surface to the caller as they happen.
    """

    def __init__(
        self,
        details: ServiceDetails,
        http_client: HttpClient | None = None,
        *,
        settings: HttpSettings | None = None,
        scan_settings: ScanSettings | None = None,
    ):
        self.details = details
        self.settings = settings or load_http_settings()
        self.scan_settings = scan_settings or load_scan_settings()
        self._owns_client = http_client is None
        self.http_client = http_client or create_default_http_client(self.settings)
        self.retry_config = RetryConfig(max_attempts=1)

    def _headers(self) -> dict[str, str]:
        headers = self.details.auth_headers()
        headers["Content-Type"] = "application/json"
        return headers

    def _send(self, request: HttpRequest) -> HttpResponse:
        return send_with_retries(self.http_client, request, retry_config=self.retry_config, settings=self.settings)

    def submit_url(self, request: ScanRequest) -> str:
        return build_url(self.details.url, SCAN_GRAPH_API, request.query_params())

    def results_url(self, scan_id: str, include_vulnerabilities: bool = False, include_licenses: bool = False) -> str:
        params: list[tuple[str, str]] = []
        if include_vulnerabilities:
            params.append(("include_vulnerabilities", "true"))
        if include_licenses:
            params.append(("include_licenses", "true"))
        return build_url(self.details.url, f"{SCAN_GRAPH_API}/{path_segment(scan_id)}", params)

    def scan_graph(self, request: ScanRequest) -> str:
        """Submit the graph and return the scan id assigned by the server."""
        url = self.submit_url(request)
        body = json.dumps(request.graph.to_dict())
        response = self._send(HttpRequest(url=url, method="POST", headers=self._headers(), body=body))
        check_status(response, 200, 201)
        scan_id = decode_scan_id(response.text)
        logger.debug("Graph scan submitted, scan id %s", scan_id)
        return scan_id

    def get_scan_graph_results(
        self,
        scan_id: str,
        include_vulnerabilities: bool = False,
        include_licenses: bool = False,
        *,
        max_wait: float | None = None,
        interval: float | None = None,
    ) -> ScanResult:
        """
        Poll until the scan is ready and return its decoded results.

        ``max_wait`` caps the total wall-clock wait (default from ScanSettings,
        15 minutes). ``interval`` is the fixed pause before each query.
        """
        poller = ResultPoller(
            self.http_client,
            self.results_url(scan_id, include_vulnerabilities, include_licenses),
            scan_id=scan_id,
            headers=self._headers(),
            interval=interval or self.scan_settings.poll_interval,
            max_wait=max_wait if max_wait and max_wait > 0 else self.scan_settings.max_wait,
            settings=self.settings,
            retry_config=self.retry_config,
        )
        response = poller.run()
        logger.debug("Scan %s ready after %d queries", scan_id, poller.queries)
        return decode_scan_response(response.text, scan_id)

    def scan(
        self,
        request: ScanRequest,
        *,
        include_vulnerabilities: bool = False,
        include_licenses: bool = False,
        max_wait: float | None = None,
    ) -> ScanResult:
        """Submit then wait for results."""
        scan_id = self.scan_graph(request)
        return self.get_scan_graph_results(
            scan_id,
            include_vulnerabilities,
            include_licenses,
            max_wait=max_wait,
        )

    def close(self) -> None:
        """Close the HTTP client if this service created it; injected clients are left open."""
        if not self._owns_client:
            return
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> ScanService:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["SCAN_GRAPH_API", "ScanService"]
