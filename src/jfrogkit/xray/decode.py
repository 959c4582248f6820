# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Decoding of graph scan response bodies."""

from __future__ import annotations

import json
from typing import Any

from ..errors import DecodeError
from ..models.scan import ScanResult


def _load_object(text: str, what: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise DecodeError(f"Malformed JSON in {what}: {exc}", body=text) from exc
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object in {what}, got {type(data).__name__}", body=text)
    return data


def decode_scan_id(text: str) -> str:
    """Extract ``scan_id`` from a graph submission response."""
    data = _load_object(text, "scan submission response")
    scan_id = data.get("scan_id")
    if not scan_id or not isinstance(scan_id, str):
        raise DecodeError("Scan submission response has no scan_id", body=text)
    return scan_id


def decode_scan_response(text: str, scan_id: str = "") -> ScanResult:
    """Parse a terminal scan results body.

    When the body omits ``scan_id`` the id that was polled is filled in.
    """
    result = ScanResult.from_mapping(_load_object(text, "scan results"))
    if not result.scan_id:
        result.scan_id = scan_id
    return result


__all__ = ["decode_scan_id", "decode_scan_response"]
