# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial gradebook schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-06-02
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    """Create gradebook tables."""
    # =========================================================================
    # PEOPLE AND COURSES
    # =========================================================================

    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "courses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("code", sa.String(50), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("code", name="uq_courses_code"),
    )

    op.create_table(
        "course_teachers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "teacher_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "assigned_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "assigned_by",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.UniqueConstraint("teacher_id", "course_id", name="uq_course_teachers_teacher_course"),
    )
    op.create_index("ix_course_teachers_teacher_id", "course_teachers", ["teacher_id"])
    op.create_index("ix_course_teachers_course_id", "course_teachers", ["course_id"])

    # =========================================================================
    # GRADING
    # =========================================================================

    op.create_table(
        "assessments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "author_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("weight", sa.Numeric(5, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("weight >= 0 AND weight <= 100", name="weight_range"),
    )
    op.create_index("ix_assessments_course_id", "assessments", ["course_id"])

    op.create_table(
        "student_scores",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "student_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "assessment_id",
            sa.Integer,
            sa.ForeignKey("assessments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("score", sa.Numeric(5, 2), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "student_id", "assessment_id", name="uq_student_scores_student_assessment"
        ),
        sa.CheckConstraint("score >= 0", name="score_non_negative"),
    )
    op.create_index("ix_student_scores_student_id", "student_scores", ["student_id"])
    op.create_index("ix_student_scores_assessment_id", "student_scores", ["assessment_id"])


def downgrade() -> None:
    """Drop gradebook tables."""
    op.drop_table("student_scores")
    op.drop_table("assessments")
    op.drop_table("course_teachers")
    op.drop_table("courses")
    op.drop_table("users")
