# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authorization scope resolution.

A teacher may manage a course's assessments and scores if and only if a
teacher assignment row links them to that course. Every check here is
read-only and side-effect free; callers run it before any mutation.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gradebook.domains.assignment.service import TeacherAssignmentService
from gradebook.infrastructure.database.models import Assessment


class ScopeResolver:
    """Answers "may this teacher manage that course or assessment?".

    Attributes:
        db: Async database session.
        assignments: Assignment registry the answers are derived from.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.assignments = TeacherAssignmentService(db)

    async def can_manage_course(self, teacher_id: int, course_id: int) -> bool:
        """Check whether the teacher is assigned to the course."""
        return await self.assignments.is_assigned(teacher_id, course_id)

    async def can_manage_assessment(self, teacher_id: int, assessment_id: int) -> bool:
        """Check whether the teacher may manage the assessment's course.

        Returns:
            False for a missing assessment as well as for an unassigned
            teacher; use assessment_exists() to tell the two apart.
        """
        course_id = await self._assessment_course_id(assessment_id)
        if course_id is None:
            return False
        return await self.can_manage_course(teacher_id, course_id)

    async def assessment_exists(self, assessment_id: int) -> bool:
        return await self._assessment_course_id(assessment_id) is not None

    async def _assessment_course_id(self, assessment_id: int) -> int | None:
        result = await self.db.execute(
            select(Assessment.course_id).where(Assessment.id == assessment_id)
        )
        return result.scalar_one_or_none()
