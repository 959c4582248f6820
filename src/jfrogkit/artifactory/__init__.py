# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Artifact repository client."""

from .buildinfo import BUILD_API, BuildInfoService

__all__ = ["BUILD_API", "BuildInfoService"]
