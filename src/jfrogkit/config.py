# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for jfrogkit."""

import base64
import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"jfrogkit/{__version__}"
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_MAX_WAIT = 15 * 60.0


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class HttpSettings:
    """HTTP client defaults."""

    timeout: float = 10.0
    max_retries: int = 2
    backoff_factor: float = 2.0
    initial_delay: float = 1.0
    retry_budget_multiplier: float = 10.0
    retry_budget_cap: float = 200.0
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True
    max_body_bytes: int = 64 * 1024 * 1024

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("JFROGKIT_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            timeout=_float_env("JFROGKIT_HTTP_TIMEOUT", cls.timeout),
            max_retries=_int_env("JFROGKIT_HTTP_RETRIES", cls.max_retries),
            backoff_factor=_float_env("JFROGKIT_HTTP_BACKOFF", cls.backoff_factor),
            initial_delay=_float_env("JFROGKIT_HTTP_INITIAL_DELAY", cls.initial_delay),
            retry_budget_multiplier=_float_env("JFROGKIT_HTTP_RETRY_BUDGET_MULTIPLIER", cls.retry_budget_multiplier),
            retry_budget_cap=_float_env("JFROGKIT_HTTP_RETRY_BUDGET_CAP", cls.retry_budget_cap),
            user_agent=os.getenv("JFROGKIT_USER_AGENT", cls.user_agent),
            verify_ssl=_bool_env("JFROGKIT_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


@dataclass
class ScanSettings:
    """Graph scan polling defaults.

    Only ``max_wait`` is read from the environment; the poll interval is fixed
    unless a caller passes one explicitly.
    """

    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_wait: float = DEFAULT_MAX_WAIT

    @classmethod
    def from_env(cls) -> "ScanSettings":
        max_wait = _float_env("JFROGKIT_XRAY_MAX_WAIT", cls.max_wait)
        if max_wait <= 0:
            max_wait = cls.max_wait
        return cls(max_wait=max_wait)


@dataclass(frozen=True)
class ServiceDetails:
    """Immutable connection details for one remote service."""

    url: str
    user: str = ""
    password: str = ""
    access_token: str = ""

    def __post_init__(self) -> None:
        # Endpoint paths are appended directly, so keep exactly one trailing slash.
        if self.url and not self.url.endswith("/"):
            object.__setattr__(self, "url", self.url + "/")

    def auth_headers(self) -> dict[str, str]:
        if self.access_token:
            return {"Authorization": f"Bearer {self.access_token}"}
        if self.user and self.password:
            token = base64.b64encode(f"{self.user}:{self.password}".encode()).decode("ascii")
            return {"Authorization": f"Basic {token}"}
        return {}

    @classmethod
    def from_env(cls, service: str) -> "ServiceDetails":
        """Read ``JFROGKIT_<SERVICE>_URL`` plus the shared credential variables."""
        prefix = f"JFROGKIT_{service.upper()}"
        return cls(
            url=os.getenv(f"{prefix}_URL", ""),
            user=os.getenv("JFROGKIT_USER", ""),
            password=os.getenv("JFROGKIT_PASSWORD", ""),
            access_token=os.getenv("JFROGKIT_ACCESS_TOKEN", ""),
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_scan_settings() -> ScanSettings:
    return ScanSettings.from_env()
