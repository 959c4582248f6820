# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Security scanner client."""

from .decode import decode_scan_id, decode_scan_response
from .poller import OutcomeSlot, PollOutcome, PollState, ResultPoller
from .scan import SCAN_GRAPH_API, ScanService

__all__ = [
    "OutcomeSlot",
    "PollOutcome",
    "PollState",
    "ResultPoller",
    "SCAN_GRAPH_API",
    "ScanService",
    "decode_scan_id",
    "decode_scan_response",
]
