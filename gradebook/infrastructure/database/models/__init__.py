# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the gradebook database."""

from gradebook.infrastructure.database.models.base import Base, SoftDeleteMixin, TimestampMixin
from gradebook.infrastructure.database.models.grading import Assessment, StudentScore
from gradebook.infrastructure.database.models.school import Course, CourseTeacher, User, UserRole

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "SoftDeleteMixin",
    # School
    "UserRole",
    "User",
    "Course",
    "CourseTeacher",
    # Grading
    "Assessment",
    "StudentScore",
]
