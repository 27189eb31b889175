# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessments and the per-student score ledger."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from gradebook.infrastructure.database.models.base import Base, TimestampMixin


class Assessment(Base, TimestampMixin):
    """A graded item belonging to a course.

    ``weight`` is the maximum attainable score and, when the ceiling policy
    is enabled, the upper bound for every recorded score.
    """

    __tablename__ = "assessments"
    __table_args__ = (CheckConstraint("weight >= 0 AND weight <= 100", name="weight_range"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    weight: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)

    def __repr__(self) -> str:
        return f"<Assessment(id={self.id}, course_id={self.course_id}, name={self.name!r})>"


class StudentScore(Base, TimestampMixin):
    """One student's score on one assessment."""

    __tablename__ = "student_scores"
    __table_args__ = (
        UniqueConstraint("student_id", "assessment_id", name="uq_student_scores_student_assessment"),
        CheckConstraint("score >= 0", name="score_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assessment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("assessments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    score: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<StudentScore(student_id={self.student_id}, "
            f"assessment_id={self.assessment_id}, score={self.score})>"
        )
