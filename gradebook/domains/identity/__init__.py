# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity directory: user id to role and status."""

from gradebook.domains.identity.service import IdentityDirectory

__all__ = ["IdentityDirectory"]
