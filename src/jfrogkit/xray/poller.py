# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Polling of asynchronous graph scan results.

A scan is queried at a fixed interval until the server answers 200 (results
ready) or anything other than 202 (failure). Independently, a deadline timer
bounds the whole wait in wall-clock time. Both activities report into a
single-assignment outcome slot; the first outcome wins and the caller blocks
only on that slot. The deadline never waits on a query that is in flight.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum

from ..config import DEFAULT_MAX_WAIT, DEFAULT_POLL_INTERVAL, HttpSettings
from ..errors import JfrogKitError, ScanTimeoutError
from ..http.client import HttpClient
from ..http.models import HttpRequest, HttpResponse, RetryConfig
from ..http.retry import send_with_retries
from ..http.utils import check_status

logger = logging.getLogger(__name__)

STATUS_READY = 200
STATUS_PENDING = 202


class PollState(str, Enum):
    PENDING = "PENDING"
    READY = "READY"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"


@dataclass(frozen=True)
class PollOutcome:
    state: PollState
    response: HttpResponse | None = None
    error: Exception | None = None


class OutcomeSlot:
    """One-shot result holder: the first offer is kept, later ones are dropped."""

    def __init__(self) -> None:
        self._future: Future[PollOutcome] = Future()
        self._lock = threading.Lock()

    def offer(self, outcome: PollOutcome) -> bool:
        with self._lock:
            if self._future.done():
                logger.debug("Discarding late %s outcome", outcome.state.value)
                return False
            self._future.set_result(outcome)
            return True

    @property
    def resolved(self) -> bool:
        return self._future.done()

    def wait(self) -> PollOutcome:
        return self._future.result()


class ResultPoller:
    """Drives one scan id from PENDING to a terminal state."""

    def __init__(
        self,
        client: HttpClient,
        url: str,
        *,
        scan_id: str = "",
        headers: dict[str, str] | None = None,
        interval: float = DEFAULT_POLL_INTERVAL,
        max_wait: float = DEFAULT_MAX_WAIT,
        settings: HttpSettings | None = None,
        retry_config: RetryConfig | None = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        if max_wait <= 0:
            raise ValueError("max_wait must be positive")
        self.client = client
        self.url = url
        self.scan_id = scan_id
        self.headers = dict(headers or {})
        self.interval = interval
        self.max_wait = max_wait
        self.settings = settings
        self.retry_config = retry_config or RetryConfig(max_attempts=1)
        self.state = PollState.PENDING
        self.queries = 0

    def run(self) -> HttpResponse:
        """
        Block until a terminal outcome and return the 200 response.

        Raises StatusError, TransportError or ScanTimeoutError for the other
        terminal states.
        """
        slot = OutcomeSlot()
        stop = threading.Event()
        ticker = threading.Thread(
            target=self._tick,
            args=(slot, stop),
            name=f"scan-poll-{self.scan_id or 'graph'}",
            daemon=True,
        )
        deadline = threading.Timer(self.max_wait, self._expire, args=(slot,))
        deadline.daemon = True

        self.state = PollState.PENDING
        self.queries = 0
        ticker.start()
        deadline.start()
        try:
            outcome = slot.wait()
        finally:
            stop.set()
            deadline.cancel()

        self.state = outcome.state
        if outcome.error is not None:
            raise outcome.error
        return outcome.response

    def _expire(self, slot: OutcomeSlot) -> None:
        slot.offer(PollOutcome(PollState.TIMED_OUT, error=ScanTimeoutError(self.scan_id, self.max_wait)))

    def _tick(self, slot: OutcomeSlot, stop: threading.Event) -> None:
        try:
            while not stop.wait(self.interval):
                if slot.resolved:
                    return
                logger.debug("Sync: Get Scan Graph results. Scan ID:%s...", self.scan_id)
                response = self._query()
                outcome = self._classify(response)
                if outcome is not None:
                    slot.offer(outcome)
                    return
        except Exception as exc:  # noqa: BLE001
            slot.offer(PollOutcome(PollState.FAILED, error=exc))

    def _query(self) -> HttpResponse:
        self.queries += 1
        request = HttpRequest(url=self.url, method="GET", headers=dict(self.headers))
        return send_with_retries(self.client, request, retry_config=self.retry_config, settings=self.settings)

    @staticmethod
    def _classify(response: HttpResponse) -> PollOutcome | None:
        try:
            check_status(response, STATUS_READY, STATUS_PENDING)
        except JfrogKitError as exc:
            return PollOutcome(PollState.FAILED, response=response, error=exc)
        if response.status_code == STATUS_READY:
            return PollOutcome(PollState.READY, response=response)
        return None


__all__ = ["OutcomeSlot", "PollOutcome", "PollState", "ResultPoller"]
