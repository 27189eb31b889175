# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components."""

from gradebook.api.middleware.auth import AuthMiddleware, CurrentUser, get_current_user
from gradebook.api.middleware.request_context import RequestContextMiddleware

__all__ = [
    "AuthMiddleware",
    "CurrentUser",
    "get_current_user",
    "RequestContextMiddleware",
]
