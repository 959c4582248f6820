# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import base64

import httpx

from jfrogkit import config
from jfrogkit.config import DEFAULT_USER_AGENT, ScanSettings, ServiceDetails
from jfrogkit.errors import (
    DecodeError,
    ErrorCategory,
    JfrogKitError,
    ScanTimeoutError,
    StatusError,
    TransportError,
    categorize_error_type,
    categorize_exception,
)


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("JFROGKIT_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("JFROGKIT_HTTP_RETRIES", "0")
    monkeypatch.setenv("JFROGKIT_HTTP_BACKOFF", "1.5")
    monkeypatch.setenv("JFROGKIT_HTTP_INITIAL_DELAY", "0.1")
    monkeypatch.setenv("JFROGKIT_HTTP_RETRY_BUDGET_MULTIPLIER", "2")
    monkeypatch.setenv("JFROGKIT_HTTP_RETRY_BUDGET_CAP", "50")
    monkeypatch.setenv("JFROGKIT_USER_AGENT", "CustomAgent/1.0")
    monkeypatch.setenv("JFROGKIT_HTTP_VERIFY_SSL", "0")

    settings = config.load_http_settings()

    assert settings.timeout == 5.5
    assert settings.max_retries == 0  # retry config clamps later
    assert settings.backoff_factor == 1.5
    assert settings.initial_delay == 0.1
    assert settings.retry_budget_multiplier == 2
    assert settings.retry_budget_cap == 50
    assert settings.user_agent == "CustomAgent/1.0"
    assert settings.verify_ssl is False


def test_http_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("JFROGKIT_HTTP_TIMEOUT", "not-a-number")
    monkeypatch.setenv("JFROGKIT_HTTP_RETRIES", "ten")
    monkeypatch.setenv("JFROGKIT_HTTP_BACKOFF", "")
    monkeypatch.setenv("JFROGKIT_HTTP_MAX_BODY_BYTES", "-1")

    settings = config.load_http_settings()

    assert settings.timeout == config.HttpSettings.timeout
    assert settings.max_retries == config.HttpSettings.max_retries
    assert settings.backoff_factor == config.HttpSettings.backoff_factor
    assert settings.max_body_bytes == config.HttpSettings.max_body_bytes
    assert settings.user_agent == DEFAULT_USER_AGENT


def test_scan_settings_defaults_and_env(monkeypatch):
    monkeypatch.delenv("JFROGKIT_XRAY_MAX_WAIT", raising=False)
    settings = config.load_scan_settings()
    assert settings.poll_interval == 5.0
    assert settings.max_wait == 15 * 60

    monkeypatch.setenv("JFROGKIT_XRAY_MAX_WAIT", "42")
    assert config.load_scan_settings().max_wait == 42.0

    monkeypatch.setenv("JFROGKIT_XRAY_MAX_WAIT", "0")
    assert config.load_scan_settings().max_wait == ScanSettings.max_wait


def test_service_details_normalizes_url_and_builds_auth():
    details = ServiceDetails(url="https://example.jfrog.io/xray", access_token="tok")
    assert details.url == "https://example.jfrog.io/xray/"
    assert details.auth_headers() == {"Authorization": "Bearer tok"}

    basic = ServiceDetails(url="https://example/", user="admin", password="secret")
    assert basic.url == "https://example/"
    expected = base64.b64encode(b"admin:secret").decode("ascii")
    assert basic.auth_headers() == {"Authorization": f"Basic {expected}"}

    assert ServiceDetails(url="https://example").auth_headers() == {}


def test_service_details_from_env(monkeypatch):
    monkeypatch.setenv("JFROGKIT_XRAY_URL", "https://x.example/xray")
    monkeypatch.setenv("JFROGKIT_ACCESS_TOKEN", "abc")
    details = ServiceDetails.from_env("xray")
    assert details.url == "https://x.example/xray/"
    assert details.access_token == "abc"


def test_categorize_exception_maps_httpx_errors():
    assert categorize_exception(httpx.ConnectTimeout("slow")) == ErrorCategory.TIMEOUT
    assert categorize_exception(httpx.ConnectError("refused")) == ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ConnectionResetError()) == ErrorCategory.CONNECTION_ERROR
    assert categorize_exception(ValueError("x")) == ErrorCategory.UNKNOWN_ERROR
    assert categorize_error_type("ReadTimeout") == ErrorCategory.TIMEOUT
    assert categorize_error_type(None) == ErrorCategory.UNKNOWN_ERROR


def test_error_kinds_are_distinct():
    status = StatusError(500, "Internal Server Error", '{"error":"boom"}')
    assert status.status_line == "500 Internal Server Error"
    assert '"error": "boom"' in status.body
    assert "500 Internal Server Error" in str(status)

    decode = DecodeError("bad", body="<html>")
    transport = TransportError("refused", error_type="ConnectError", url="http://x/")
    assert transport.category == ErrorCategory.CONNECTION_ERROR
    assert "http://x/" in str(transport)

    timeout = ScanTimeoutError("abc123", 0.5)
    assert isinstance(timeout, TimeoutError)
    assert timeout.scan_id == "abc123"

    for error in (status, decode, transport, timeout):
        assert isinstance(error, JfrogKitError)
    assert not isinstance(decode, StatusError)
