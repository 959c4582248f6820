# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import time

import httpx
import pytest

from jfrogkit.config import HttpSettings
from jfrogkit.errors import ErrorCategory, StatusError, TransportError
from jfrogkit.http.adapters import StubHttpClient
from jfrogkit.http.headers import header_value
from jfrogkit.http.httpx_client import HttpxClient
from jfrogkit.http.models import HttpRequest, HttpResponse, RetryConfig
from jfrogkit.http.retry import build_default_retry_config, send_with_retries
from jfrogkit.http.url import build_url, encode_query
from jfrogkit.http.utils import check_status, check_transport


class SequenceHttpClient:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = 0

    def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
        self.calls += 1
        return self._responses[min(self.calls - 1, len(self._responses) - 1)]

    def close(self) -> None:
        self.closed = True


def test_retry_config_from_settings_clamps_minimum():
    settings = HttpSettings(max_retries=0)
    retry = RetryConfig.from_settings(settings)
    assert retry.max_attempts == 1
    assert retry.backoff_factor == settings.backoff_factor


def test_send_with_retries_success_after_retry(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda _: None)
    resp_retry = HttpResponse(ok=False, error_message="timeout")
    resp_ok = HttpResponse(ok=True, status_code=200, text="done")
    client = SequenceHttpClient([resp_retry, resp_ok])
    result = send_with_retries(client, HttpRequest(url="http://example"), settings=HttpSettings(max_retries=2))
    assert result.ok is True
    assert result.meta["retry_count"] == 1
    assert client.calls == 2


def test_send_with_retries_honors_max_attempts(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda _: None)
    resp = HttpResponse(ok=False, error_message="blocked")
    client = SequenceHttpClient([resp, HttpResponse(ok=True, status_code=200)])
    result = send_with_retries(client, HttpRequest(url="http://example"), retry_config=RetryConfig(max_attempts=1))
    assert result.ok is False
    assert result.meta["retry_exhausted"] is True
    assert client.calls == 1


def test_send_with_retries_does_not_retry_status_code_failures(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda _: None)
    resp_http_error = HttpResponse(ok=True, status_code=500, text="boom")
    client = SequenceHttpClient([resp_http_error, HttpResponse(ok=True, status_code=200)])
    result = send_with_retries(client, HttpRequest(url="http://example"), retry_config=RetryConfig(max_attempts=3))
    assert result.status_code == 500
    assert client.calls == 1


def test_send_with_retries_converts_exceptions(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda _: None)

    class ExceptionThenSuccess:
        def __init__(self):
            self.calls = 0

        def request(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
            self.calls += 1
            if self.calls == 1:
                raise RuntimeError("boom")
            return HttpResponse(ok=True, status_code=200, text="ok")

    client = ExceptionThenSuccess()
    result = send_with_retries(client, HttpRequest(url="http://example"), retry_config=RetryConfig(max_attempts=2))
    assert result.ok is True
    assert result.meta["retry_count"] == 1
    assert client.calls == 2


def test_build_default_retry_config_sets_expected_defaults():
    cfg = build_default_retry_config()
    assert cfg.max_attempts >= 1


def test_stub_client_plays_sequences_and_repeats_last():
    stub = StubHttpClient({"http://x/a": [HttpResponse(ok=True, status_code=202), HttpResponse(ok=True, status_code=200)]})
    codes = [stub.request(HttpRequest(url="http://x/a")).status_code for _ in range(3)]
    assert codes == [202, 200, 200]
    assert stub.calls("http://x/a") == 3

    missing = stub.request(HttpRequest(url="http://x/missing"))
    assert missing.ok is False
    assert missing.status_code is None


def test_header_value_is_case_insensitive():
    headers = {"x-checksum-sha256": "abc"}
    assert header_value(headers, "X-Checksum-Sha256") == "abc"
    assert header_value({"X-CHECKSUM-SHA256": " def "}, "x-checksum-sha256") == "def"
    assert header_value({}, "X-Checksum-Sha256", "none") == "none"


def test_encode_query_keeps_repeats_and_slashes():
    assert encode_query([]) == ""
    assert encode_query([("watch", "a"), ("watch", "b")]) == "?watch=a&watch=b"
    assert encode_query([("repo_path", "libs-release/org/app")]) == "?repo_path=libs-release/org/app"
    assert encode_query([("project", "my proj")]) == "?project=my+proj"
    assert build_url("http://host/xray/", "/api/v1/scan/graph", [("project", "p")]) == "http://host/xray/api/v1/scan/graph?project=p"


def test_check_helpers_raise_typed_errors():
    with pytest.raises(TransportError) as excinfo:
        check_transport(HttpResponse(ok=False, error_message="refused", error_type="ConnectError"), "http://x/")
    assert excinfo.value.category == ErrorCategory.CONNECTION_ERROR

    with pytest.raises(StatusError) as excinfo:
        check_status(HttpResponse(ok=True, status_code=403, reason="Forbidden", text="denied"), 200)
    assert excinfo.value.status_code == 403
    assert excinfo.value.body == "denied"

    ok = HttpResponse(ok=True, status_code=201)
    assert check_status(ok, 200, 201) is ok


def test_httpx_client_success_and_error(monkeypatch):
    requests = []

    class FakeHttpxClient:
        def __init__(self, follow_redirects, timeout, verify):  # noqa: ARG002
            self.follow_redirects = follow_redirects
            self.timeout = timeout
            self.verify = verify

        def stream(self, method, url, headers=None, content=None, timeout=None):
            requests.append({"method": method, "url": url, "headers": headers, "content": content, "timeout": timeout})

            class Resp:
                status_code = 202
                reason_phrase = "Accepted"
                headers = httpx.Headers({"Content-Type": "application/json"})
                encoding = "utf-8"

                def __init__(self, response_url: str):
                    self.url = httpx.URL(response_url)

                def iter_bytes(self):
                    yield b'{"scan_id": "abc"}'

            class _Ctx:
                def __enter__(self):
                    return Resp(url)

                def __exit__(self, exc_type, exc, tb):  # noqa: ARG002
                    return None

            return _Ctx()

        def close(self):
            requests.append({"closed": True})

    monkeypatch.setattr(httpx, "Client", FakeHttpxClient)
    client = HttpxClient(HttpSettings(user_agent="UA/1.0"))
    resp = client.request(HttpRequest(url="http://example/path", method="POST", headers={"X": "1"}, body="payload", timeout=1.2))
    assert resp.ok is True
    assert resp.status_code == 202
    assert resp.reason == "Accepted"
    assert resp.text == '{"scan_id": "abc"}'
    assert requests[0]["headers"]["User-Agent"] == "UA/1.0"
    assert requests[0]["timeout"] == 1.2

    class ErrorClient(FakeHttpxClient):
        def stream(self, *_, **__):
            raise httpx.ReadTimeout("boom")

    monkeypatch.setattr(httpx, "Client", ErrorClient)
    err_client = HttpxClient(HttpSettings())
    err_resp = err_client.request(HttpRequest(url="http://example"))
    assert err_resp.ok is False
    assert err_resp.status_code is None
    assert err_resp.error_message == "boom"
    assert err_resp.meta["error_category"] == ErrorCategory.TIMEOUT
