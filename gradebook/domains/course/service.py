# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course service for administering courses.

This module provides the CourseService class for:
- Course creation with unique codes
- Course updates
- Course deletion, cascading to assessments, scores and assignments
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gradebook.core.errors import ConflictError, GradebookError, NotFoundError
from gradebook.infrastructure.database.models import (
    Assessment,
    Course,
    CourseTeacher,
    StudentScore,
)
from gradebook.models.course import CourseCreateRequest, CourseResponse, CourseUpdateRequest

logger = logging.getLogger(__name__)


class CourseServiceError(GradebookError):
    """Base exception for course service errors."""

    pass


class CourseNotFoundError(CourseServiceError, NotFoundError):
    """Raised when course is not found."""

    def __init__(self, course_id: int) -> None:
        super().__init__(f"Course with ID {course_id} not found.", {"course_id": course_id})


class CourseCodeExistsError(CourseServiceError, ConflictError):
    """Raised when a course code is already taken."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Course code '{code}' already exists.", {"code": code})


class CourseService:
    """Service for managing courses.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize course service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def create_course(self, request: CourseCreateRequest, created_by: int) -> CourseResponse:
        """Create a new course.

        Args:
            request: Course creation data.
            created_by: ID of the administrator creating the course.

        Returns:
            Created course.

        Raises:
            CourseCodeExistsError: If the code is already in use.
        """
        code = request.code.strip()
        await self._ensure_code_available(code)

        course = Course(name=request.name.strip(), code=code)
        self.db.add(course)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise CourseCodeExistsError(code) from e
        await self.db.refresh(course)

        logger.info("Created course: id=%s, code=%s, by=%s", course.id, course.code, created_by)

        return CourseResponse.model_validate(course)

    async def get_course(self, course_id: int) -> CourseResponse:
        """Get a course by ID.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await self.get_course_model(self.db, course_id)
        return CourseResponse.model_validate(course)

    async def update_course(
        self,
        course_id: int,
        request: CourseUpdateRequest,
        updated_by: int,
    ) -> CourseResponse:
        """Update a course.

        Args:
            course_id: Course identifier.
            request: Fields to change.
            updated_by: ID of the administrator.

        Returns:
            Updated course.

        Raises:
            CourseNotFoundError: If course not found.
            CourseCodeExistsError: If the new code is taken by another course.
        """
        course = await self.get_course_model(self.db, course_id)

        if request.code is not None:
            code = request.code.strip()
            if code != course.code:
                await self._ensure_code_available(code)
                course.code = code
        if request.name is not None:
            course.name = request.name.strip()

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise CourseCodeExistsError(request.code or course.code) from e
        await self.db.refresh(course)

        logger.info("Updated course: id=%s, by=%s", course_id, updated_by)

        return CourseResponse.model_validate(course)

    async def delete_course(self, course_id: int, deleted_by: int) -> None:
        """Delete a course and everything it owns in one transaction.

        Scores of the course's assessments go first, then the assessments,
        the teacher assignments and finally the course row.

        Raises:
            CourseNotFoundError: If course not found.
        """
        await self.get_course_model(self.db, course_id)

        assessment_ids = select(Assessment.id).where(Assessment.course_id == course_id)
        statements = [
            delete(StudentScore).where(StudentScore.assessment_id.in_(assessment_ids)),
            delete(Assessment).where(Assessment.course_id == course_id),
            delete(CourseTeacher).where(CourseTeacher.course_id == course_id),
            delete(Course).where(Course.id == course_id),
        ]
        try:
            for statement in statements:
                await self.db.execute(statement.execution_options(synchronize_session=False))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Deleted course: id=%s, by=%s", course_id, deleted_by)

    @staticmethod
    async def get_course_model(db: AsyncSession, course_id: int) -> Course:
        """Load a course row.

        Shared by the services that need to tell a missing course apart
        from a forbidden one.

        Raises:
            CourseNotFoundError: If course not found.
        """
        result = await db.execute(select(Course).where(Course.id == course_id))
        course = result.scalar_one_or_none()
        if not course:
            raise CourseNotFoundError(course_id)
        return course

    async def _ensure_code_available(self, code: str) -> None:
        result = await self.db.execute(select(Course.id).where(Course.code == code))
        if result.scalar_one_or_none() is not None:
            raise CourseCodeExistsError(code)
