# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest

from jfrogkit.config import HttpSettings, ScanSettings, ServiceDetails
from jfrogkit.errors import DecodeError, ScanTimeoutError, StatusError, TransportError
from jfrogkit.http.adapters import StubHttpClient
from jfrogkit.http.models import HttpResponse
from jfrogkit.models import GraphNode, ScanRequest
from jfrogkit.xray import scan as scan_module
from jfrogkit.xray.scan import ScanService

XRAY = ServiceDetails(url="http://xray", access_token="token")
SUBMIT = "http://xray/api/v1/scan/graph"
RESULTS = "http://xray/api/v1/scan/graph/abc123"


def _service(stub: StubHttpClient) -> ScanService:
    return ScanService(
        XRAY,
        stub,
        settings=HttpSettings(max_retries=1),
        scan_settings=ScanSettings(poll_interval=0.01, max_wait=5),
    )


def _graph() -> GraphNode:
    return GraphNode(component_id="gav://g:a:1.0", nodes=[])


def test_scan_graph_with_project_key_returns_scan_id():
    stub = StubHttpClient({f"{SUBMIT}?project=proj1": HttpResponse(ok=True, status_code=200, text='{"scan_id":"abc123"}')})
    scan_id = _service(stub).scan_graph(ScanRequest.create(_graph(), project_key="proj1"))

    assert scan_id == "abc123"
    request = stub.requests[0]
    assert "?project=proj1" in request.url
    assert request.method == "POST"
    assert json.loads(request.body) == {"component_id": "gav://g:a:1.0"}
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Authorization"] == "Bearer token"


@pytest.mark.parametrize(
    "kwargs, expected_url",
    [
        ({"project_key": "p", "repo_path": "libs/app", "watches": ["w1"]}, f"{SUBMIT}?project=p"),
        ({"repo_path": "libs/app", "watches": ["w1"]}, f"{SUBMIT}?repo_path=libs/app"),
        ({"watches": ["w1", "w2"]}, f"{SUBMIT}?watch=w1&watch=w2"),
        ({}, SUBMIT),
    ],
)
def test_submission_uses_highest_precedence_scope(kwargs, expected_url):
    stub = StubHttpClient({expected_url: HttpResponse(ok=True, status_code=201, text='{"scan_id":"abc123"}')})
    assert _service(stub).scan_graph(ScanRequest.create(_graph(), **kwargs)) == "abc123"
    assert [request.url for request in stub.requests] == [expected_url]


def test_scan_graph_unexpected_status_raises_status_error():
    stub = StubHttpClient({SUBMIT: HttpResponse(ok=True, status_code=400, reason="Bad Request", text='{"error":"bad graph"}')})
    with pytest.raises(StatusError) as excinfo:
        _service(stub).scan_graph(ScanRequest(graph=_graph()))
    assert excinfo.value.status_code == 400
    assert "bad graph" in excinfo.value.body


def test_scan_graph_transport_failure_raises_transport_error():
    stub = StubHttpClient({SUBMIT: HttpResponse(ok=False, error_message="refused", error_type="ConnectError")})
    with pytest.raises(TransportError):
        _service(stub).scan_graph(ScanRequest(graph=_graph()))
    assert len(stub.requests) == 1


def test_scan_graph_undecodable_body_raises_decode_error():
    stub = StubHttpClient({SUBMIT: HttpResponse(ok=True, status_code=200, text="<html>")})
    with pytest.raises(DecodeError):
        _service(stub).scan_graph(ScanRequest(graph=_graph()))


@pytest.mark.parametrize(
    "vulns, licenses, suffix",
    [
        (True, False, "?include_vulnerabilities=true"),
        (True, True, "?include_vulnerabilities=true&include_licenses=true"),
        (False, True, "?include_licenses=true"),
        (False, False, ""),
    ],
)
def test_results_url_flags(vulns, licenses, suffix):
    url = _service(StubHttpClient()).results_url("abc123", vulns, licenses)
    assert url == RESULTS + suffix


def test_get_scan_graph_results_polls_until_ready():
    url = RESULTS + "?include_vulnerabilities=true"
    payload = {"scan_id": "abc123", "status": "completed", "vulnerabilities": [{"summary": "x", "severity": "High"}]}
    stub = StubHttpClient(
        {
            url: [
                HttpResponse(ok=True, status_code=202),
                HttpResponse(ok=True, status_code=202),
                HttpResponse(ok=True, status_code=200, text=json.dumps(payload)),
            ]
        }
    )
    result = _service(stub).get_scan_graph_results("abc123", include_vulnerabilities=True, include_licenses=False)

    assert result.scan_id == "abc123"
    assert result.vulnerabilities[0].severity == "High"
    assert stub.calls(url) == 3
    assert stub.requests[0].headers["Authorization"] == "Bearer token"


def test_get_scan_graph_results_ready_with_bad_body_is_decode_error():
    stub = StubHttpClient({RESULTS: HttpResponse(ok=True, status_code=200, text="{not json")})
    with pytest.raises(DecodeError) as excinfo:
        _service(stub).get_scan_graph_results("abc123")
    assert not isinstance(excinfo.value, StatusError)


def test_get_scan_graph_results_max_wait_override():
    stub = StubHttpClient({RESULTS: HttpResponse(ok=True, status_code=202)})
    with pytest.raises(ScanTimeoutError) as excinfo:
        _service(stub).get_scan_graph_results("abc123", max_wait=0.1)
    assert excinfo.value.max_wait == 0.1


def test_scan_submits_then_polls():
    stub = StubHttpClient(
        {
            f"{SUBMIT}?watch=w1": HttpResponse(ok=True, status_code=200, text='{"scan_id":"abc123"}'),
            RESULTS + "?include_licenses=true": HttpResponse(ok=True, status_code=200, text='{"licenses":[{"license_key":"MIT"}]}'),
        }
    )
    result = _service(stub).scan(ScanRequest.create(_graph(), watches=["w1"]), include_licenses=True)
    assert result.scan_id == "abc123"
    assert result.licenses[0].key == "MIT"
    assert [request.method for request in stub.requests] == ["POST", "GET"]


class ClosingStubHttpClient(StubHttpClient):
    def __init__(self, responses=None):
        super().__init__(responses)
        self.closed = False

    def close(self) -> None:
        self.closed = True


def test_close_releases_only_a_self_created_client(monkeypatch):
    created = ClosingStubHttpClient()
    monkeypatch.setattr(scan_module, "create_default_http_client", lambda settings=None: created)
    with ScanService(XRAY, settings=HttpSettings(), scan_settings=ScanSettings()) as service:
        assert service.http_client is created
    assert created.closed is True

    injected = ClosingStubHttpClient()
    ScanService(XRAY, injected, settings=HttpSettings(), scan_settings=ScanSettings()).close()
    assert injected.closed is False
