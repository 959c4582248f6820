# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry helper for HttpClient implementations."""

from __future__ import annotations

import logging
import time

from ..config import HttpSettings, load_http_settings
from .client import HttpClient
from .models import HttpRequest, HttpResponse, RetryConfig

logger = logging.getLogger(__name__)


def build_default_retry_config() -> RetryConfig:
    """Create a RetryConfig from environment-backed HttpSettings."""
    settings = load_http_settings()
    return RetryConfig.from_settings(settings)


def send_with_retries(
    client: HttpClient,
    request: HttpRequest,
    *,
    retry_config: RetryConfig | None = None,
    settings: HttpSettings | None = None,
) -> HttpResponse:
    """Execute a request, retrying transport failures with backoff.

    Responses that carry a status code are returned as-is, whatever the code.
    """
    settings = settings or load_http_settings()
    cfg = retry_config or RetryConfig.from_settings(settings)

    attempt = 0
    delay = cfg.initial_delay
    last_response: HttpResponse | None = None
    base_timeout = request.timeout if request.timeout is not None else settings.timeout
    budget = 0.0
    if base_timeout and base_timeout > 0:
        budget = settings.retry_budget_multiplier * cfg.max_attempts * base_timeout
        if settings.retry_budget_cap and settings.retry_budget_cap > 0:
            budget = min(budget, settings.retry_budget_cap)
    deadline = time.monotonic() + budget if budget > 0 else None

    while attempt < cfg.max_attempts:
        if deadline is not None and time.monotonic() >= deadline:
            break
        try:
            response = client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse(
                ok=False,
                url=request.url,
                error_message=str(exc),
                error_type=exc.__class__.__name__,
            )
        last_response = response

        if response.ok or response.status_code is not None:
            if attempt:
                response.meta.setdefault("retry_count", attempt)
            return response

        attempt += 1
        if attempt >= cfg.max_attempts:
            break
        logger.debug("Retrying %s %s after %s: %s", request.method, request.url, response.error_type, response.error_message)
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            delay_to_sleep = min(delay, remaining)
        else:
            delay_to_sleep = delay
        time.sleep(delay_to_sleep)
        delay *= cfg.backoff_factor

    if last_response is not None:
        last_response.meta.setdefault("retry_count", attempt)
        last_response.meta.setdefault("retry_exhausted", True)
        return last_response

    error_message = "Retry budget exhausted" if deadline else None
    return HttpResponse(ok=False, url=request.url, error_message=error_message, meta={"retry_count": attempt, "retry_exhausted": True})
