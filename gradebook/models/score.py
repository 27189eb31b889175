# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Score ledger request and response models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ScoreEntry(BaseModel):
    """One (student, score) pair in a submitted batch.

    Both fields accept any JSON value; ScoreLedgerService reports missing
    or malformed values with the offending entry in the message.
    """

    student_id: Any = None
    score: Any = None


class ScoreBatchRequest(BaseModel):
    """Batch of scores for one assessment."""

    scores: list[ScoreEntry] = Field(default_factory=list)


class ScoreBatchResult(BaseModel):
    """Outcome counts of a committed batch."""

    model_config = ConfigDict(populate_by_name=True)

    created_count: int = Field(alias="createdCount")
    updated_count: int = Field(alias="updatedCount")


class StudentScoreResponse(BaseModel):
    """A recorded score as seen by a teacher."""

    student_id: int
    username: str | None = None
    full_name: str | None = None
    score: float
    updated_at: datetime


class MyScoreResponse(BaseModel):
    """A student's own score on one assessment.

    ``score`` is None while the assessment has not been graded.
    """

    assessment_id: int
    score: float | None = None
    graded: bool = False


class MyScoreItem(BaseModel):
    """One entry in a student's score report."""

    assessment_id: int
    assessment_name: str
    weight: float
    course_id: int
    course_name: str
    course_code: str
    score: float
    updated_at: datetime
