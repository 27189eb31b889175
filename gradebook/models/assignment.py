# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher assignment request and response models."""

from datetime import datetime

from pydantic import BaseModel, Field


class AssignTeacherRequest(BaseModel):
    """Request to assign a teacher to a course."""

    teacher_id: int = Field(gt=0, description="User id of the teacher")


class TeacherAssignmentResponse(BaseModel):
    """A teacher-course assignment."""

    course_id: int
    teacher_id: int
    assigned_at: datetime
    assigned_by: int | None = None


class TeacherSummary(BaseModel):
    """Teacher assigned to a course, as listed for administrators."""

    teacher_id: int
    username: str
    full_name: str
    is_active: bool
    assigned_at: datetime


class AssignedCourse(BaseModel):
    """Course a teacher is assigned to."""

    course_id: int
    name: str
    code: str
    assigned_at: datetime
