# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment service for managing a course's graded items.

This module provides the AssessmentService class for:
- Assessment creation by an assigned teacher
- Assessment retrieval, update and deletion behind the scope resolver
- Listing a course's assessments for teachers and students

Any teacher assigned to the course may edit or delete an assessment, not
only its author.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from gradebook.core.config import get_settings
from gradebook.core.config.settings import GradingSettings
from gradebook.core.errors import ForbiddenError, GradebookError, NotFoundError, ValidationError
from gradebook.domains.authorization.scope import ScopeResolver
from gradebook.domains.course.service import CourseService
from gradebook.infrastructure.database.models import Assessment, StudentScore, UserRole
from gradebook.models.assessment import AssessmentResponse, AssessmentUpdateRequest
from gradebook.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)

MAX_WEIGHT = Decimal("100")
_CENT = Decimal("0.01")


class AssessmentServiceError(GradebookError):
    """Base exception for assessment service errors."""

    pass


class AssessmentValidationError(AssessmentServiceError, ValidationError):
    """Raised when name or weight is missing or out of range."""

    pass


class AssessmentNotFoundError(AssessmentServiceError, NotFoundError):
    """Raised when assessment is not found."""

    def __init__(self, assessment_id: int) -> None:
        super().__init__("Assessment not found.", {"assessment_id": assessment_id})


class AssessmentAccessDeniedError(AssessmentServiceError, ForbiddenError):
    """Raised when the caller is not assigned to the assessment's course."""

    pass


def parse_weight(raw: object) -> Decimal:
    """Validate an assessment weight.

    Args:
        raw: Candidate weight; must be a real number in [0, 100].

    Returns:
        The weight rounded to two decimal places.

    Raises:
        AssessmentValidationError: If the value is not a number in range.
    """
    message = "Weight must be a number between 0 and 100."
    if isinstance(raw, bool) or not isinstance(raw, (int, float, Decimal)):
        raise AssessmentValidationError(message, {"weight": raw})
    try:
        weight = Decimal(str(raw))
    except InvalidOperation as e:
        raise AssessmentValidationError(message, {"weight": raw}) from e
    if not weight.is_finite() or weight < 0 or weight > MAX_WEIGHT:
        raise AssessmentValidationError(message, {"weight": raw})
    return weight.quantize(_CENT, rounding=ROUND_HALF_UP)


def _clean_name(raw: str | None) -> str:
    name = (raw or "").strip()
    if not name:
        raise AssessmentValidationError("Assessment name is required.")
    if len(name) > 200:
        raise AssessmentValidationError("Assessment name must be at most 200 characters.")
    return name


class AssessmentService:
    """Service for managing assessments.

    Attributes:
        db: Async database session.
        scope: Authorization scope resolver.
        grading: Grading policy settings.
    """

    def __init__(self, db: AsyncSession, grading: GradingSettings | None = None) -> None:
        """Initialize assessment service.

        Args:
            db: Async database session.
            grading: Grading policy; defaults to the application settings.
        """
        self.db = db
        self.scope = ScopeResolver(db)
        self.grading = grading or get_settings().grading

    async def create(
        self,
        course_id: int,
        author_teacher_id: int,
        name: str | None,
        weight: object,
    ) -> AssessmentResponse:
        """Create an assessment in a course.

        Checks run in order: input validation, course existence, then the
        caller's assignment to the course.

        Args:
            course_id: Course identifier.
            author_teacher_id: Teacher creating the assessment.
            name: Assessment name.
            weight: Maximum attainable score, 0-100.

        Returns:
            Created assessment.

        Raises:
            AssessmentValidationError: If name or weight is invalid.
            CourseNotFoundError: If course not found.
            AssessmentAccessDeniedError: If teacher is not assigned to the course.
        """
        if name is None or weight is None:
            raise AssessmentValidationError("Assessment name and weight are required.")
        clean_name = _clean_name(name)
        clean_weight = parse_weight(weight)

        await CourseService.get_course_model(self.db, course_id)

        if not await self.scope.can_manage_course(author_teacher_id, course_id):
            raise AssessmentAccessDeniedError(
                "Forbidden: You are not assigned to teach this course.",
                {"course_id": course_id},
            )

        assessment = Assessment(
            course_id=course_id,
            author_id=author_teacher_id,
            name=clean_name,
            weight=clean_weight,
        )
        self.db.add(assessment)
        await self.db.commit()
        await self.db.refresh(assessment)

        logger.info(
            "Created assessment: id=%s, course=%s, weight=%s, by=%s",
            assessment.id,
            course_id,
            clean_weight,
            author_teacher_id,
        )

        return self._to_response(assessment)

    async def get(self, assessment_id: int, caller_teacher_id: int) -> AssessmentResponse:
        """Get an assessment the caller may manage.

        Raises:
            AssessmentNotFoundError: If assessment not found.
            AssessmentAccessDeniedError: If teacher is not assigned to its course.
        """
        assessment = await self._get_managed_assessment(
            assessment_id,
            caller_teacher_id,
            "Forbidden: You are not authorized to view this assessment.",
        )
        return self._to_response(assessment)

    async def update(
        self,
        assessment_id: int,
        caller_teacher_id: int,
        patch: AssessmentUpdateRequest,
    ) -> AssessmentResponse:
        """Update an assessment's name and/or weight.

        Args:
            assessment_id: Assessment identifier.
            caller_teacher_id: Teacher performing the update.
            patch: Fields to change.

        Returns:
            Updated assessment.

        Raises:
            AssessmentValidationError: If a field is invalid, or the new
                weight is below an already recorded score while the weight
                ceiling is enforced.
            AssessmentNotFoundError: If assessment not found.
            AssessmentAccessDeniedError: If teacher is not assigned to its course.
        """
        if not patch.has_changes():
            raise AssessmentValidationError("Nothing to update. Provide name and/or weight.")

        new_name = _clean_name(patch.name) if patch.name is not None else None
        if patch.weight is not None:
            new_weight = parse_weight(patch.weight)
        elif "weight" in patch.model_fields_set:
            raise AssessmentValidationError("Weight must be a number between 0 and 100 if provided.")
        else:
            new_weight = None

        assessment = await self._get_managed_assessment(
            assessment_id,
            caller_teacher_id,
            "Forbidden: You are not authorized to update this assessment.",
            lock=True,
        )

        if new_name is not None:
            assessment.name = new_name
        if new_weight is not None:
            assessment.weight = new_weight

        try:
            await self.db.flush()
            # Must run after the flush.
            if new_weight is not None and self.grading.enforce_weight_ceiling:
                highest = await self._highest_score(assessment_id)
                if highest is not None and highest > new_weight:
                    raise AssessmentValidationError(
                        f"Weight {new_weight} is below the highest recorded score {highest}.",
                        {"weight": str(new_weight), "highest_score": str(highest)},
                    )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(assessment)

        logger.info("Updated assessment: id=%s, by=%s", assessment_id, caller_teacher_id)

        return self._to_response(assessment)

    async def delete(self, assessment_id: int, caller_teacher_id: int) -> None:
        """Delete an assessment and all of its scores in one transaction.

        Raises:
            AssessmentNotFoundError: If assessment not found.
            AssessmentAccessDeniedError: If teacher is not assigned to its course.
        """
        await self._get_managed_assessment(
            assessment_id,
            caller_teacher_id,
            "Forbidden: You are not authorized to delete this assessment.",
        )

        try:
            await self.db.execute(
                delete(StudentScore)
                .where(StudentScore.assessment_id == assessment_id)
                .execution_options(synchronize_session=False)
            )
            await self.db.execute(
                delete(Assessment)
                .where(Assessment.id == assessment_id)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Deleted assessment: id=%s, by=%s", assessment_id, caller_teacher_id)

    async def list_for_course(
        self,
        course_id: int,
        caller_id: int,
        caller_role: UserRole | str,
    ) -> list[AssessmentResponse]:
        """List a course's assessments, oldest first.

        Students see every course's assessments; teachers only those of
        courses they are assigned to.

        Raises:
            CourseNotFoundError: If course not found.
            AssessmentAccessDeniedError: If a teacher is not assigned, or the
                caller is neither teacher nor student.
        """
        await CourseService.get_course_model(self.db, course_id)

        role = UserRole(caller_role)
        if role == UserRole.TEACHER:
            if not await self.scope.can_manage_course(caller_id, course_id):
                raise AssessmentAccessDeniedError(
                    "Forbidden: You are not assigned to view assessments for this course.",
                    {"course_id": course_id},
                )
        elif role != UserRole.STUDENT:
            raise AssessmentAccessDeniedError("Forbidden: Teacher or student access required.")

        result = await self.db.execute(
            select(Assessment)
            .where(Assessment.course_id == course_id)
            .order_by(Assessment.created_at, Assessment.id)
        )
        return [self._to_response(a) for a in result.scalars().all()]

    async def _get_managed_assessment(
        self,
        assessment_id: int,
        teacher_id: int,
        denied_message: str,
        lock: bool = False,
    ) -> Assessment:
        query = select(Assessment).where(Assessment.id == assessment_id)
        if lock:
            query = query.with_for_update()
        result = await self.db.execute(query)
        assessment = result.scalar_one_or_none()
        if not assessment:
            raise AssessmentNotFoundError(assessment_id)

        if not await self.scope.can_manage_course(teacher_id, assessment.course_id):
            raise AssessmentAccessDeniedError(denied_message, {"assessment_id": assessment_id})

        return assessment

    async def _highest_score(self, assessment_id: int) -> Decimal | None:
        result = await self.db.execute(
            select(func.max(StudentScore.score)).where(StudentScore.assessment_id == assessment_id)
        )
        highest = result.scalar_one_or_none()
        return Decimal(str(highest)) if highest is not None else None

    def _to_response(self, assessment: Assessment) -> AssessmentResponse:
        return AssessmentResponse(
            id=assessment.id,
            course_id=assessment.course_id,
            author_id=assessment.author_id,
            name=assessment.name,
            weight=float(assessment.weight),
            created_at=ensure_utc(assessment.created_at),
            updated_at=ensure_utc(assessment.updated_at),
        )
