# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations."""

from __future__ import annotations

import threading
from collections.abc import Sequence

from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """Deterministic, programmable HttpClient for tests and offline runs.

    Each URL maps either to a single response or to a sequence that is played
    back in order; the last entry of a sequence repeats once it is reached.
    """

    def __init__(self, responses: dict[str, HttpResponse | Sequence[HttpResponse]] | None = None):
        self._responses: dict[str, list[HttpResponse]] = {}
        self._cursor: dict[str, int] = {}
        self._lock = threading.Lock()
        self.requests: list[HttpRequest] = []
        for url, response in (responses or {}).items():
            self.add(url, response)

    def add(self, url: str, response: HttpResponse | Sequence[HttpResponse]) -> None:
        items = [response] if isinstance(response, HttpResponse) else list(response)
        with self._lock:
            self._responses[url] = items
            self._cursor[url] = 0

    def calls(self, url: str) -> int:
        with self._lock:
            return sum(1 for request in self.requests if request.url == url)

    def request(self, request: HttpRequest) -> HttpResponse:
        with self._lock:
            self.requests.append(request)
            items = self._responses.get(request.url)
            if not items:
                return HttpResponse(ok=False, url=request.url, error_message="No stubbed response configured")
            index = self._cursor[request.url]
            self._cursor[request.url] = min(index + 1, len(items) - 1)
            return items[index]

    def close(self) -> None:
        return None
