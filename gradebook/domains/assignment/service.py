# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher assignment service for managing course teacher assignments.

This module provides the TeacherAssignmentService class for:
- Teacher assignment to courses
- Assignment removal
- Assignment lookups used by the authorization scope resolver
- Listing a course's teachers and a teacher's courses

The course_teachers table is the only source of truth for which teacher may
manage which course. Removing an assignment never touches the assessments
or scores the teacher authored.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gradebook.core.errors import ConflictError, GradebookError, NotFoundError
from gradebook.domains.course.service import CourseService
from gradebook.domains.identity.service import IdentityDirectory
from gradebook.infrastructure.database.models import Course, CourseTeacher, User
from gradebook.models.assignment import AssignedCourse, TeacherAssignmentResponse, TeacherSummary
from gradebook.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


class AssignmentServiceError(GradebookError):
    """Base exception for assignment service errors."""

    pass


class TeacherNotFoundError(AssignmentServiceError, NotFoundError):
    """Raised when the id does not resolve to an active teacher."""

    def __init__(self, teacher_id: int) -> None:
        super().__init__(f"Teacher with ID {teacher_id} not found.", {"teacher_id": teacher_id})


class AlreadyAssignedError(AssignmentServiceError, ConflictError):
    """Raised when teacher is already assigned to the course."""

    def __init__(self, teacher_id: int, course_id: int) -> None:
        super().__init__(
            "Teacher is already assigned to this course.",
            {"teacher_id": teacher_id, "course_id": course_id},
        )


class NotAssignedError(AssignmentServiceError, NotFoundError):
    """Raised when teacher is not assigned to the course."""

    def __init__(self, teacher_id: int, course_id: int) -> None:
        super().__init__(
            "Teacher is not assigned to this course.",
            {"teacher_id": teacher_id, "course_id": course_id},
        )


class TeacherAssignmentService:
    """Service for managing teacher assignments.

    Attributes:
        db: Async database session.
        identity: Identity directory used to validate teachers.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize assignment service.

        Args:
            db: Async database session.
        """
        self.db = db
        self.identity = IdentityDirectory(db)

    async def is_assigned(self, teacher_id: int, course_id: int) -> bool:
        """Check whether a teacher is assigned to a course.

        Args:
            teacher_id: Teacher user id.
            course_id: Course identifier.

        Returns:
            True if an assignment row exists.
        """
        result = await self.db.execute(
            select(CourseTeacher.id).where(
                CourseTeacher.teacher_id == teacher_id,
                CourseTeacher.course_id == course_id,
            )
        )
        return result.first() is not None

    async def assign(
        self,
        course_id: int,
        teacher_id: int,
        assigned_by: int,
    ) -> TeacherAssignmentResponse:
        """Assign a teacher to a course.

        Args:
            course_id: Course identifier.
            teacher_id: Teacher user id.
            assigned_by: ID of user performing assignment.

        Returns:
            Assignment response.

        Raises:
            CourseNotFoundError: If course not found.
            TeacherNotFoundError: If teacher not found or not active.
            AlreadyAssignedError: If teacher already assigned.
        """
        await CourseService.get_course_model(self.db, course_id)

        teacher = await self.identity.find_active_teacher(teacher_id)
        if not teacher:
            raise TeacherNotFoundError(teacher_id)

        if await self.is_assigned(teacher_id, course_id):
            raise AlreadyAssignedError(teacher_id, course_id)

        assignment = CourseTeacher(
            course_id=course_id,
            teacher_id=teacher_id,
            assigned_by=assigned_by,
        )
        self.db.add(assignment)

        # A concurrent assign of the same pair loses on the unique constraint.
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise AlreadyAssignedError(teacher_id, course_id) from e
        await self.db.refresh(assignment)

        logger.info(
            "Assigned teacher: teacher=%s, course=%s, by=%s",
            teacher_id,
            course_id,
            assigned_by,
        )

        return TeacherAssignmentResponse(
            course_id=assignment.course_id,
            teacher_id=assignment.teacher_id,
            assigned_at=assignment.assigned_at,
            assigned_by=assignment.assigned_by,
        )

    async def unassign(self, course_id: int, teacher_id: int, removed_by: int) -> None:
        """Remove a teacher from a course.

        Assessments the teacher authored stay with the course.

        Args:
            course_id: Course identifier.
            teacher_id: Teacher user id.
            removed_by: ID of user performing removal.

        Raises:
            NotAssignedError: If the assignment does not exist.
        """
        result = await self.db.execute(
            delete(CourseTeacher)
            .where(
                CourseTeacher.course_id == course_id,
                CourseTeacher.teacher_id == teacher_id,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotAssignedError(teacher_id, course_id)

        await self.db.commit()

        logger.info(
            "Removed teacher assignment: teacher=%s, course=%s, by=%s",
            teacher_id,
            course_id,
            removed_by,
        )

    async def list_for_course(self, course_id: int) -> list[TeacherSummary]:
        """List teachers assigned to a course.

        Raises:
            CourseNotFoundError: If course not found.
        """
        await CourseService.get_course_model(self.db, course_id)

        result = await self.db.execute(
            select(CourseTeacher, User)
            .join(User, User.id == CourseTeacher.teacher_id)
            .where(CourseTeacher.course_id == course_id)
            .order_by(CourseTeacher.assigned_at, CourseTeacher.id)
        )

        return [
            TeacherSummary(
                teacher_id=user.id,
                username=user.username,
                full_name=user.full_name,
                is_active=user.is_usable,
                assigned_at=assignment.assigned_at,
            )
            for assignment, user in result.all()
        ]

    async def list_for_teacher(self, teacher_id: int) -> list[AssignedCourse]:
        """List the courses a teacher is assigned to, ordered by course code."""
        result = await self.db.execute(
            select(CourseTeacher, Course)
            .join(Course, Course.id == CourseTeacher.course_id)
            .where(CourseTeacher.teacher_id == teacher_id)
            .order_by(Course.code)
        )

        return [
            AssignedCourse(
                course_id=course.id,
                name=course.name,
                code=course.code,
                assigned_at=ensure_utc(assignment.assigned_at),
            )
            for assignment, course in result.all()
        ]
