# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the score ledger service preconditions.

The write path itself is covered against a real database in
tests/integration/test_score_ledger.py.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from gradebook.core.config.settings import GradingSettings
from gradebook.domains.assessment.service import AssessmentNotFoundError
from gradebook.domains.score.service import (
    ScoreAccessDeniedError,
    ScoreConflictError,
    ScoreLedgerService,
    ScoreValidationError,
    StudentNotFoundError,
)
from gradebook.infrastructure.database.connection import DatabaseError
from gradebook.models.score import ScoreEntry


def _scalar(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


def _first(row):
    result = MagicMock()
    result.first.return_value = row
    return result


def _scalars(values):
    result = MagicMock()
    result.scalars.return_value.all.return_value = values
    return result


def _authorized(weight="20.00"):
    """Results for: assessment course lookup, assignment lookup, weight lookup."""
    return [_scalar(1), _first((1,)), _scalar(Decimal(weight))]


@pytest.fixture
def ledger(mock_db):
    """Create score ledger service with mock database."""
    return ScoreLedgerService(mock_db, GradingSettings(enforce_weight_ceiling=True, max_batch_size=3))


class TestSubmitBatchPreconditions:
    """Tests for the checks that run before any write."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("entries", [[], None])
    async def test_empty_batch(self, ledger, mock_db, entries):
        """Test an empty batch is rejected without touching the database."""
        with pytest.raises(ScoreValidationError) as exc_info:
            await ledger.submit_batch(assessment_id=1, caller_teacher_id=10, entries=entries)

        assert exc_info.value.message == "Scores data must be a non-empty array."
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_batch_too_large(self, ledger, mock_db):
        """Test the configured batch limit."""
        entries = [ScoreEntry(student_id=i, score=1) for i in range(1, 5)]

        with pytest.raises(ScoreValidationError, match="at most 3"):
            await ledger.submit_batch(assessment_id=1, caller_teacher_id=10, entries=entries)

        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_assessment_not_found(self, ledger, mock_db):
        """Test a missing assessment is reported as not found."""
        mock_db.execute.side_effect = [_scalar(None), _scalar(None)]

        with pytest.raises(AssessmentNotFoundError):
            await ledger.submit_batch(1, 10, [{"student_id": 2, "score": 5}])

    @pytest.mark.asyncio
    async def test_teacher_not_assigned(self, ledger, mock_db):
        """Test an unassigned teacher is forbidden."""
        mock_db.execute.side_effect = [_scalar(1), _first(None), _scalar(1)]

        with pytest.raises(ScoreAccessDeniedError, match="not authorized to submit scores"):
            await ledger.submit_batch(1, 10, [{"student_id": 2, "score": 5}])

        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_field(self, ledger, mock_db):
        """Test entries must carry both fields."""
        mock_db.execute.side_effect = _authorized()

        with pytest.raises(ScoreValidationError) as exc_info:
            await ledger.submit_batch(1, 10, [{"student_id": 2, "score": 5}, {"student_id": 3}])

        assert exc_info.value.message == "Each score entry must have student_id and score."
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_score_above_weight(self, ledger, mock_db):
        """Test the weight ceiling rejects the whole batch."""
        mock_db.execute.side_effect = _authorized("20.00")

        with pytest.raises(ScoreValidationError, match="exceeds max score of 20.00"):
            await ledger.submit_batch(1, 10, [ScoreEntry(student_id=2, score=18), ScoreEntry(student_id=3, score=25)])

        mock_db.add.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_ceiling_disabled(self, mock_db):
        """Test scores above the weight pass the parser when the ceiling is off."""
        service = ScoreLedgerService(mock_db, GradingSettings(enforce_weight_ceiling=False))
        mock_db.execute.side_effect = [*_authorized("20.00"), _scalars([2]), _scalars([])]

        result = await service.submit_batch(1, 10, [ScoreEntry(student_id=2, score=25)])

        assert result.created_count == 1
        assert result.updated_count == 0

    @pytest.mark.asyncio
    async def test_unknown_student(self, ledger, mock_db):
        """Test ids that are not active students fail the batch."""
        mock_db.execute.side_effect = [*_authorized(), _scalars([2])]

        with pytest.raises(ScoreValidationError) as exc_info:
            await ledger.submit_batch(1, 10, [{"student_id": 2, "score": 5}, {"student_id": 77, "score": 5}])

        assert exc_info.value.message == "Invalid student ID found in scores. Please check student data."
        assert exc_info.value.details == {"student_ids": [77]}
        mock_db.add.assert_not_called()


class TestSubmitBatchFailures:
    """Tests for storage failures during the write."""

    @pytest.mark.asyncio
    async def test_integrity_error_is_retryable_conflict(self, ledger, mock_db):
        """Test a lost race rolls back and reports a retryable error."""
        mock_db.execute.side_effect = [*_authorized(), _scalars([2]), _scalars([]), _scalar(Decimal("20.00"))]
        mock_db.commit.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

        with pytest.raises(ScoreConflictError) as exc_info:
            await ledger.submit_batch(1, 10, [{"student_id": 2, "score": 5}])

        assert exc_info.value.retryable is True
        mock_db.rollback.assert_called_once()

    @pytest.mark.asyncio
    async def test_weight_lowered_before_write(self, ledger, mock_db):
        """Test the ceiling is checked again against the weight read after the flush."""
        mock_db.execute.side_effect = [*_authorized("20.00"), _scalars([2]), _scalars([]), _scalar(Decimal("10.00"))]

        with pytest.raises(ScoreValidationError, match="exceeds max score of 10.00"):
            await ledger.submit_batch(1, 10, [{"student_id": 2, "score": 18}])

        mock_db.flush.assert_called_once()
        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_storage_error(self, ledger, mock_db):
        """Test other storage failures become DatabaseError."""
        mock_db.execute.side_effect = [*_authorized(), _scalars([2]), _scalars([])]
        mock_db.flush.side_effect = OperationalError("UPDATE", {}, Exception("database is locked"))

        with pytest.raises(DatabaseError) as exc_info:
            await ledger.submit_batch(1, 10, [{"student_id": 2, "score": 5}])

        assert exc_info.value.message == "Error processing scores."
        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()


class TestStudentReads:
    """Tests for student-facing reads."""

    @pytest.mark.asyncio
    async def test_my_score_requires_student(self, ledger, mock_db):
        """Test a caller who is not an active student."""
        mock_db.execute.side_effect = [_scalar(None)]

        with pytest.raises(StudentNotFoundError):
            await ledger.get_my_score(student_id=5, assessment_id=1)

    @pytest.mark.asyncio
    async def test_my_score_not_graded(self, ledger, mock_db):
        """Test an ungraded assessment is not an error."""
        mock_db.execute.side_effect = [_scalar(MagicMock()), _scalar(None)]

        result = await ledger.get_my_score(student_id=5, assessment_id=1)

        assert result.score is None
        assert result.graded is False

    @pytest.mark.asyncio
    async def test_my_score_graded(self, ledger, mock_db):
        """Test a recorded score is returned as a number."""
        mock_db.execute.side_effect = [_scalar(MagicMock()), _scalar(Decimal("18.50"))]

        result = await ledger.get_my_score(student_id=5, assessment_id=1)

        assert result.score == 18.5
        assert result.graded is True
