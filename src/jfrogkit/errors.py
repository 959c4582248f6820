# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import json
import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


_ERROR_TYPE_CATEGORIES = {
    "TimeoutException": ErrorCategory.TIMEOUT,
    "ConnectTimeout": ErrorCategory.TIMEOUT,
    "ReadTimeout": ErrorCategory.TIMEOUT,
    "WriteTimeout": ErrorCategory.TIMEOUT,
    "PoolTimeout": ErrorCategory.TIMEOUT,
    "ConnectError": ErrorCategory.CONNECTION_ERROR,
    "RemoteProtocolError": ErrorCategory.CONNECTION_ERROR,
    "NetworkError": ErrorCategory.CONNECTION_ERROR,
    "ProxyError": ErrorCategory.CONNECTION_ERROR,
    "ConnectionError": ErrorCategory.CONNECTION_ERROR,
    "ConnectionRefusedError": ErrorCategory.CONNECTION_ERROR,
    "ConnectionResetError": ErrorCategory.CONNECTION_ERROR,
    "SSLError": ErrorCategory.SSL_ERROR,
    "SSLCertVerificationError": ErrorCategory.SSL_ERROR,
    "gaierror": ErrorCategory.DNS_ERROR,
}


def categorize_exception(exc: Exception) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, ConnectionError):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def categorize_error_type(error_type: str | None) -> ErrorCategory:
    """Same mapping as categorize_exception, for responses that only kept the exception's class name."""
    return _ERROR_TYPE_CATEGORIES.get(error_type or "", ErrorCategory.UNKNOWN_ERROR)


def indent_json(body: str) -> str:
    """Pretty-print a JSON body; anything else is returned untouched."""
    try:
        return json.dumps(json.loads(body), indent=2)
    except (TypeError, ValueError):
        return body


class JfrogKitError(Exception):
    """Base class for every error raised by jfrogkit."""


class TransportError(JfrogKitError):
    """The request never produced an HTTP response."""

    def __init__(
        self,
        message: str,
        *,
        error_type: str | None = None,
        url: str | None = None,
        category: ErrorCategory | None = None,
    ):
        self.error_type = error_type
        self.url = url
        self.category = category or categorize_error_type(error_type)
        detail = f"{error_type}: {message}" if error_type else message
        super().__init__(f"{detail} ({url})" if url else detail)


class StatusError(JfrogKitError):
    """The server answered with a status the operation does not accept."""

    def __init__(self, status_code: int, reason: str | None = None, body: str = ""):
        self.status_code = status_code
        self.reason = reason or ""
        self.body = indent_json(body or "")
        status_line = f"{status_code} {self.reason}".strip()
        message = f"Server response: {status_line}"
        if self.body:
            message = f"{message}\n{self.body}"
        super().__init__(message)

    @property
    def status_line(self) -> str:
        return f"{self.status_code} {self.reason}".strip()


class DecodeError(JfrogKitError):
    """The exchange succeeded but the payload could not be decoded."""

    def __init__(self, message: str, *, body: str = ""):
        self.body = body
        super().__init__(message)


class ScanTimeoutError(JfrogKitError, TimeoutError):
    """No terminal scan response arrived before the polling deadline."""

    def __init__(self, scan_id: str, max_wait: float):
        self.scan_id = scan_id
        self.max_wait = max_wait
        super().__init__(f"Timeout for sync get scan graph results (scan id {scan_id}, waited {max_wait:g}s)")


__all__ = [
    "DecodeError",
    "ErrorCategory",
    "JfrogKitError",
    "ScanTimeoutError",
    "StatusError",
    "TransportError",
    "categorize_error_type",
    "categorize_exception",
    "indent_json",
]
