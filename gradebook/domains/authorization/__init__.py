# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course-scoped authorization."""

from gradebook.domains.authorization.scope import ScopeResolver

__all__ = ["ScopeResolver"]
