# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared response checks for the service clients."""

from ..errors import StatusError, TransportError
from .models import HttpResponse


def check_transport(response: HttpResponse, url: str | None = None) -> HttpResponse:
    """Raise TransportError when no HTTP exchange took place."""
    if response.status_code is None:
        raise TransportError(
            response.error_message or "Request failed without a response",
            error_type=response.error_type,
            url=response.url or url,
            category=response.meta.get("error_category"),
        )
    return response


def check_status(response: HttpResponse, *accepted: int) -> HttpResponse:
    """Raise StatusError unless the response status is one of ``accepted``."""
    check_transport(response)
    if response.status_code not in accepted:
        raise StatusError(response.status_code, response.reason, response.text)
    return response


__all__ = ["check_status", "check_transport"]
