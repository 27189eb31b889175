# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Bearer token verification."""

from gradebook.domains.auth.tokens import (
    InvalidTokenError,
    TokenError,
    TokenExpiredError,
    TokenPayload,
    TokenVerifier,
)

__all__ = [
    "TokenVerifier",
    "TokenPayload",
    "TokenError",
    "TokenExpiredError",
    "InvalidTokenError",
]
