# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the gradebook.

Example:
    >>> from gradebook.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.grading.enforce_weight_ceiling
    True
"""

from gradebook.core.config.settings import (
    APISettings,
    CORSSettings,
    DatabaseSettings,
    GradingSettings,
    JWTSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "JWTSettings",
    "GradingSettings",
    "CORSSettings",
    "APISettings",
]
