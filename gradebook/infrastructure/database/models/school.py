# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""People, courses and the teacher-course assignment relation."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from gradebook.infrastructure.database.models.base import Base, SoftDeleteMixin, TimestampMixin
from gradebook.utils.datetime import utc_now


class UserRole(str, enum.Enum):
    """Closed set of caller roles."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class User(Base, TimestampMixin, SoftDeleteMixin):
    """A person known to the school.

    Teachers and students are users with the matching role; their user id
    doubles as their teacher or student id.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    @property
    def is_usable(self) -> bool:
        """Active and not archived."""
        return self.is_active and not self.is_archived

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r}, role={self.role})>"


class Course(Base, TimestampMixin):
    """A course offered by the school."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, code={self.code!r})>"


class CourseTeacher(Base):
    """Teacher assignment to a course.

    The presence of a row is the only source of truth for whether a teacher
    may manage a course's assessments and scores.
    """

    __tablename__ = "course_teachers"
    __table_args__ = (UniqueConstraint("teacher_id", "course_id", name="uq_course_teachers_teacher_course"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    assigned_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<CourseTeacher(teacher_id={self.teacher_id}, course_id={self.course_id})>"
