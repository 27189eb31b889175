# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Score ledger service.

This module provides the ScoreLedgerService class for:
- Atomic batch submission of student scores for one assessment
- Teacher-facing score listing per assessment
- Student-facing reads of their own scores

A batch is all-or-nothing. Every entry is validated before the first write,
and the writes run in a single transaction, so a failure anywhere leaves the
ledger exactly as it was. Each (student, assessment) pair holds at most one
score; resubmitting an identical value is a no-op.
"""

import logging
import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gradebook.core.config import get_settings
from gradebook.core.config.settings import GradingSettings
from gradebook.core.errors import (
    ForbiddenError,
    GradebookError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from gradebook.domains.assessment.service import AssessmentNotFoundError
from gradebook.domains.authorization.scope import ScopeResolver
from gradebook.domains.identity.service import IdentityDirectory
from gradebook.infrastructure.database.connection import DatabaseError
from gradebook.infrastructure.database.models import Assessment, Course, StudentScore, User
from gradebook.models.score import (
    MyScoreItem,
    MyScoreResponse,
    ScoreBatchResult,
    ScoreEntry,
    StudentScoreResponse,
)
from gradebook.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)

# Largest value a NUMERIC(5,2) column holds.
STORAGE_MAX_SCORE = Decimal("999.99")
_CENT = Decimal("0.01")


class ScoreServiceError(GradebookError):
    """Base exception for score ledger errors."""

    pass


class ScoreValidationError(ScoreServiceError, ValidationError):
    """Raised when a batch or one of its entries is invalid."""

    pass


class ScoreAccessDeniedError(ScoreServiceError, ForbiddenError):
    """Raised when the caller may not manage the assessment's scores."""

    pass


class StudentNotFoundError(ScoreServiceError, NotFoundError):
    """Raised when the caller does not resolve to an active student."""

    def __init__(self, student_id: int) -> None:
        super().__init__("Student profile not found.", {"student_id": student_id})


class ScoreConflictError(ScoreServiceError, InternalError):
    """Raised when a concurrent batch wrote the same rows first.

    The batch was rolled back and may be resubmitted unchanged.
    """

    pass


def parse_student_id(raw: Any) -> int:
    """Parse a student id from a JSON value.

    Accepts positive integers and strings of digits.

    Raises:
        ScoreValidationError: If the value is not a positive integer id.
    """
    value: int | None = None
    if isinstance(raw, bool):
        value = None
    elif isinstance(raw, int):
        value = raw
    elif isinstance(raw, float) and raw.is_integer():
        value = int(raw)
    elif isinstance(raw, str) and raw.strip().isdigit():
        value = int(raw.strip())

    if value is None or value <= 0:
        raise ScoreValidationError(f"Invalid student ID '{raw}'.", {"student_id": raw})
    return value


def parse_score(raw: Any, ceiling: Decimal | None = None, student_id: Any = None) -> Decimal:
    """Parse and range-check a score value.

    Numbers and numeric strings are accepted. The result is rounded half-up
    to two decimal places before the range checks.

    Args:
        raw: Score as received.
        ceiling: Inclusive upper bound, or None for no policy bound.
        student_id: Used only to make error messages actionable.

    Returns:
        The normalized score.

    Raises:
        ScoreValidationError: If the value is not a finite number, is
            negative, or exceeds the ceiling or the storage limit.
    """
    details = {"student_id": student_id, "score": raw}
    invalid = ScoreValidationError(
        f"Invalid score value '{raw}' for student ID {student_id}. Must be non-negative.",
        details,
    )

    if isinstance(raw, bool) or not isinstance(raw, (int, float, str, Decimal)):
        raise invalid
    if isinstance(raw, float) and not math.isfinite(raw):
        raise invalid

    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation as e:
        raise invalid from e

    if not value.is_finite() or value < 0:
        raise invalid

    # Values this far out cannot be rounded within the decimal context; the
    # range checks below reject them unrounded.
    if value <= STORAGE_MAX_SCORE + 1:
        value = value.quantize(_CENT, rounding=ROUND_HALF_UP)

    if ceiling is not None and value > ceiling:
        raise ScoreValidationError(
            f"Score {value} for student ID {student_id} exceeds max score of {ceiling}.",
            details,
        )
    if value > STORAGE_MAX_SCORE:
        raise ScoreValidationError(
            f"Score {value} for student ID {student_id} exceeds the largest storable score.",
            details,
        )
    return value


class ScoreLedgerService:
    """Service for recording and reading student scores.

    Attributes:
        db: Async database session.
        scope: Authorization scope resolver.
        identity: Identity directory used to resolve students.
        grading: Grading policy settings.
    """

    def __init__(self, db: AsyncSession, grading: GradingSettings | None = None) -> None:
        """Initialize score ledger service.

        Args:
            db: Async database session.
            grading: Grading policy; defaults to the application settings.
        """
        self.db = db
        self.scope = ScopeResolver(db)
        self.identity = IdentityDirectory(db)
        self.grading = grading or get_settings().grading

    async def submit_batch(
        self,
        assessment_id: int,
        caller_teacher_id: int,
        entries: Sequence[ScoreEntry | dict[str, Any]] | None,
    ) -> ScoreBatchResult:
        """Record a batch of scores for one assessment.

        Preconditions are checked in order and any failure leaves the ledger
        untouched: non-empty batch, caller scope, then per-entry validation
        against the assessment's weight. Entries are applied in order, so a
        student listed twice ends with the later value.

        Args:
            assessment_id: Assessment identifier.
            caller_teacher_id: Teacher submitting the scores.
            entries: (student_id, score) pairs.

        Returns:
            Number of rows created and updated.

        Raises:
            ScoreValidationError: If the batch is empty or any entry is invalid.
            AssessmentNotFoundError: If assessment not found.
            ScoreAccessDeniedError: If teacher is not assigned to its course.
            ScoreConflictError: If a concurrent batch wrote the same rows.
            DatabaseError: On any other storage failure.
        """
        if not entries:
            raise ScoreValidationError("Scores data must be a non-empty array.")
        if len(entries) > self.grading.max_batch_size:
            raise ScoreValidationError(
                f"A batch may hold at most {self.grading.max_batch_size} scores.",
                {"size": len(entries)},
            )

        if not await self.scope.can_manage_assessment(caller_teacher_id, assessment_id):
            if not await self.scope.assessment_exists(assessment_id):
                raise AssessmentNotFoundError(assessment_id)
            raise ScoreAccessDeniedError(
                "Forbidden: You are not authorized to submit scores for this assessment.",
                {"assessment_id": assessment_id},
            )

        weight = await self._assessment_weight(assessment_id)
        ceiling = weight if self.grading.enforce_weight_ceiling else None

        parsed = [self._parse_entry(entry, ceiling) for entry in entries]
        await self._ensure_students(parsed)

        try:
            created_count, updated_count = await self._apply(assessment_id, parsed)
            await self.db.commit()
        except GradebookError:
            await self.db.rollback()
            raise
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(
                "Score batch conflicted with a concurrent write: assessment=%s",
                assessment_id,
            )
            raise ScoreConflictError(
                "Scores were modified concurrently. Please resubmit the batch.",
                {"assessment_id": assessment_id},
            ) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError("Error processing scores.", e) from e

        logger.info(
            "Submitted scores: assessment=%s, created=%s, updated=%s, by=%s",
            assessment_id,
            created_count,
            updated_count,
            caller_teacher_id,
        )

        return ScoreBatchResult(created_count=created_count, updated_count=updated_count)

    async def get_for_assessment(
        self,
        assessment_id: int,
        caller_teacher_id: int,
    ) -> list[StudentScoreResponse]:
        """List recorded scores for an assessment.

        Raises:
            AssessmentNotFoundError: If assessment not found.
            ScoreAccessDeniedError: If teacher is not assigned to its course.
        """
        if not await self.scope.can_manage_assessment(caller_teacher_id, assessment_id):
            if not await self.scope.assessment_exists(assessment_id):
                raise AssessmentNotFoundError(assessment_id)
            raise ScoreAccessDeniedError(
                "Forbidden: You are not authorized to view scores for this assessment.",
                {"assessment_id": assessment_id},
            )

        result = await self.db.execute(
            select(StudentScore, User)
            .join(User, User.id == StudentScore.student_id)
            .where(StudentScore.assessment_id == assessment_id)
            .order_by(StudentScore.student_id)
        )

        return [
            StudentScoreResponse(
                student_id=score.student_id,
                username=user.username,
                full_name=user.full_name,
                score=float(score.score),
                updated_at=ensure_utc(score.updated_at),
            )
            for score, user in result.all()
        ]

    async def get_my_score(self, student_id: int, assessment_id: int) -> MyScoreResponse:
        """Get the caller's own score on an assessment.

        An ungraded (or unknown) assessment is not an error: the response
        carries ``score=None`` and ``graded=False``.

        Raises:
            StudentNotFoundError: If the caller is not an active student.
        """
        await self._require_student(student_id)

        result = await self.db.execute(
            select(StudentScore.score).where(
                StudentScore.student_id == student_id,
                StudentScore.assessment_id == assessment_id,
            )
        )
        score = result.scalar_one_or_none()
        if score is None:
            return MyScoreResponse(assessment_id=assessment_id)
        return MyScoreResponse(assessment_id=assessment_id, score=float(score), graded=True)

    async def list_my_scores(self, student_id: int) -> list[MyScoreItem]:
        """List every recorded score of the caller with its assessment and course.

        Raises:
            StudentNotFoundError: If the caller is not an active student.
        """
        await self._require_student(student_id)

        result = await self.db.execute(
            select(StudentScore, Assessment, Course)
            .join(Assessment, Assessment.id == StudentScore.assessment_id)
            .join(Course, Course.id == Assessment.course_id)
            .where(StudentScore.student_id == student_id)
            .order_by(Course.code, Assessment.created_at, Assessment.id)
        )

        return [
            MyScoreItem(
                assessment_id=assessment.id,
                assessment_name=assessment.name,
                weight=float(assessment.weight),
                course_id=course.id,
                course_name=course.name,
                course_code=course.code,
                score=float(score.score),
                updated_at=ensure_utc(score.updated_at),
            )
            for score, assessment, course in result.all()
        ]

    def _parse_entry(
        self,
        entry: ScoreEntry | dict[str, Any],
        ceiling: Decimal | None,
    ) -> tuple[int, Decimal]:
        if isinstance(entry, ScoreEntry):
            raw_student_id, raw_score = entry.student_id, entry.score
        elif isinstance(entry, dict):
            raw_student_id, raw_score = entry.get("student_id"), entry.get("score")
        else:
            raw_student_id = raw_score = None

        if raw_student_id is None or raw_score is None:
            raise ScoreValidationError("Each score entry must have student_id and score.")

        student_id = parse_student_id(raw_student_id)
        return student_id, parse_score(raw_score, ceiling, student_id=student_id)

    async def _ensure_students(self, parsed: list[tuple[int, Decimal]]) -> None:
        requested = {student_id for student_id, _ in parsed}
        known = await self.identity.active_student_ids(requested)
        unknown = sorted(requested - known)
        if unknown:
            raise ScoreValidationError(
                "Invalid student ID found in scores. Please check student data.",
                {"student_ids": unknown},
            )

    async def _apply(
        self,
        assessment_id: int,
        parsed: list[tuple[int, Decimal]],
    ) -> tuple[int, int]:
        student_ids = {student_id for student_id, _ in parsed}
        result = await self.db.execute(
            select(StudentScore)
            .where(
                StudentScore.assessment_id == assessment_id,
                StudentScore.student_id.in_(sorted(student_ids)),
            )
            .with_for_update()
        )
        rows = {row.student_id: row for row in result.scalars().all()}

        created_count = 0
        updated_count = 0
        for student_id, value in parsed:
            row = rows.get(student_id)
            if row is None:
                row = StudentScore(student_id=student_id, assessment_id=assessment_id, score=value)
                self.db.add(row)
                rows[student_id] = row
                created_count += 1
            elif row.score != value:
                row.score = value
                updated_count += 1

        await self.db.flush()

        # The weight may have been lowered since validation; re-read it after
        # the flush.
        if self.grading.enforce_weight_ceiling:
            weight = await self._assessment_weight(assessment_id)
            for student_id, value in parsed:
                if value > weight:
                    raise ScoreValidationError(
                        f"Score {value} for student ID {student_id} exceeds max score of {weight}.",
                        {"student_id": student_id, "score": str(value)},
                    )

        return created_count, updated_count

    async def _assessment_weight(self, assessment_id: int) -> Decimal:
        result = await self.db.execute(
            select(Assessment.weight).where(Assessment.id == assessment_id).with_for_update()
        )
        weight = result.scalar_one_or_none()
        if weight is None:
            raise AssessmentNotFoundError(assessment_id)
        return Decimal(str(weight))

    async def _require_student(self, student_id: int) -> User:
        student = await self.identity.find_active_student(student_id)
        if not student:
            raise StudentNotFoundError(student_id)
        return student
