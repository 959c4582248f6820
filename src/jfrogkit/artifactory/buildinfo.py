# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Build-info publishing and retrieval."""

from __future__ import annotations

import json
import logging
from contextlib import suppress
from urllib.parse import quote_plus

from ..config import HttpSettings, ServiceDetails, load_http_settings
from ..errors import DecodeError, indent_json
from ..http.client import HttpClient, create_default_http_client
from ..http.headers import header_value
from ..http.models import HttpRequest, HttpResponse, RetryConfig
from ..http.retry import send_with_retries
from ..http.url import build_url, encode_query, path_segment, project_params
from ..http.utils import check_status, check_transport
from ..models.buildinfo import BuildInfo, BuildInfoParams, PublishedBuildInfo, Sha256Summary

logger = logging.getLogger(__name__)

BUILD_API = "api/build"
BUILD_INFO_CONTENT_TYPE = "application/vnd.org.jfrog.artifactory+json"
CHECKSUM_HEADER = "X-Checksum-Sha256"


class BuildInfoService:
    def __init__(
        self,
        details: ServiceDetails,
        http_client: HttpClient | None = None,
        *,
        dry_run: bool = False,
        settings: HttpSettings | None = None,
        retry_config: RetryConfig | None = None,
    ):
        self.details = details
        self.dry_run = dry_run
        self.settings = settings or load_http_settings()
        self._owns_client = http_client is None
        self.http_client = http_client or create_default_http_client(self.settings)
        self.retry_config = retry_config or RetryConfig.from_settings(self.settings)

    def _send(self, request: HttpRequest) -> HttpResponse:
        return send_with_retries(self.http_client, request, retry_config=self.retry_config, settings=self.settings)

    def build_url(self, build: BuildInfo, project_key: str = "") -> str:
        """Browse URL of a published build in the web UI."""
        return f"{self.details.url}webapp/builds/{quote_plus(build.name)}/{quote_plus(build.number)}{encode_query(project_params(project_key))}"

    def publish_build_info(self, build: BuildInfo, project_key: str = "") -> Sha256Summary:
        """
        Upload a build-info document.

        In dry-run mode nothing is sent; the payload is logged and an
        unsucceeded summary is returned.
        """
        summary = Sha256Summary()
        content = json.dumps(build.to_dict())
        if self.dry_run:
            logger.info("[Dry run] Logging Build info preview...")
            logger.info("%s", indent_json(content))
            return summary

        headers = self.details.auth_headers()
        headers["Content-Type"] = BUILD_INFO_CONTENT_TYPE
        logger.info("Deploying build info...")
        response = self._send(
            HttpRequest(
                url=build_url(self.details.url, BUILD_API, project_params(project_key)),
                method="PUT",
                headers=headers,
                body=content,
            )
        )
        check_status(response, 200, 201, 204)
        summary.succeeded = True
        summary.sha256 = header_value(response.headers, CHECKSUM_HEADER)

        logger.debug("Artifactory response: %s", response.status_line)
        logger.info("Build info successfully deployed. Browse it in Artifactory under %s", self.build_url(build, project_key))
        return summary

    def get_build_info(self, params: BuildInfoParams) -> tuple[PublishedBuildInfo | None, bool]:
        """
        Fetch a published build-info document.

        Returns ``(None, False)`` when the build does not exist; any status
        other than 200 or 404 raises StatusError.
        """
        url = build_url(
            self.details.url,
            f"{BUILD_API}/{path_segment(params.build_name)}/{path_segment(params.build_number)}",
            project_params(params.project_key),
        )
        response = check_transport(self._send(HttpRequest(url=url, headers=self.details.auth_headers())), url)
        if response.status_code == 404:
            logger.debug("Build %s/%s not found", params.build_name, params.build_number)
            return None, False
        check_status(response, 200)
        try:
            data = json.loads(response.text)
        except ValueError as exc:
            raise DecodeError(f"Malformed JSON in build info response: {exc}", body=response.text) from exc
        if not isinstance(data, dict):
            raise DecodeError("Expected a JSON object in build info response", body=response.text)
        return PublishedBuildInfo.from_mapping(data), True

    def close(self) -> None:
        """Close the HTTP client if this service created it; injected clients are left open."""
        if not self._owns_client:
            return
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> BuildInfoService:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["BUILD_API", "BuildInfoService"]
