# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers shared by the service clients."""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import quote, urlencode

QueryParams = Sequence[tuple[str, str]]


def encode_query(params: QueryParams) -> str:
    """
    Render ``params`` as a query string including the leading ``?``.

    Repeated keys are kept in order (``watch=a&watch=b``) and ``/`` is left
    unescaped so repository paths stay readable. Empty input yields ``""``.
    """
    if not params:
        return ""
    return "?" + urlencode(list(params), safe="/")


def build_url(base_url: str, path: str, params: QueryParams = ()) -> str:
    """Join a service base URL (ending in ``/``) with an API path and query."""
    return f"{base_url}{path.lstrip('/')}{encode_query(params)}"


def path_segment(value: str) -> str:
    """Escape a single path segment (build names may contain ``/``)."""
    return quote(value, safe="")


def project_params(project_key: str | None) -> list[tuple[str, str]]:
    return [("project", project_key)] if project_key else []


__all__ = ["QueryParams", "build_url", "encode_query", "path_segment", "project_params"]
