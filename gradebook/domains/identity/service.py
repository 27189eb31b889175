# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity directory.

Resolves user ids to their role and status. Lookups are explicit about
whether archived users are visible; there is no implicit default filter.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gradebook.infrastructure.database.models import User, UserRole

logger = logging.getLogger(__name__)


class IdentityDirectory:
    """Read-only lookups over users.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_active(self, user_id: int, role: UserRole | None = None) -> User | None:
        """Find an active, non-archived user.

        Args:
            user_id: User identifier.
            role: If given, the user must also have this role.

        Returns:
            The user, or None if absent, inactive, archived or of another role.
        """
        query = select(User).where(
            User.id == user_id,
            User.is_active.is_(True),
            User.archived_at.is_(None),
        )
        if role is not None:
            query = query.where(User.role == role.value)

        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_including_archived(self, user_id: int) -> User | None:
        """Find a user regardless of status."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_active_teacher(self, teacher_id: int) -> User | None:
        return await self.find_active(teacher_id, UserRole.TEACHER)

    async def find_active_student(self, student_id: int) -> User | None:
        return await self.find_active(student_id, UserRole.STUDENT)

    async def active_student_ids(self, student_ids: set[int]) -> set[int]:
        """Return the subset of ids that belong to active students.

        Args:
            student_ids: Candidate student ids.

        Returns:
            Ids that resolve to active, non-archived students.
        """
        if not student_ids:
            return set()

        result = await self.db.execute(
            select(User.id).where(
                User.id.in_(sorted(student_ids)),
                User.role == UserRole.STUDENT.value,
                User.is_active.is_(True),
                User.archived_at.is_(None),
            )
        )
        return set(result.scalars().all())
