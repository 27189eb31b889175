# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime helpers.

All timestamps are stored timezone-aware in UTC. Use these helpers instead
of ``datetime.now()`` so naive and aware values never mix.

Usage:
    from gradebook.utils.datetime import utc_now

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware in UTC.

    SQLite drops timezone information on round-trip; naive values read back
    from it are assumed to be UTC.

    Args:
        dt: Datetime to normalize, or None.

    Returns:
        Timezone-aware UTC datetime, or None if input was None.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
