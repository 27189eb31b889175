# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course request and response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CourseCreateRequest(BaseModel):
    """Request to create a course."""

    name: str = Field(min_length=1, max_length=200, description="Course name")
    code: str = Field(min_length=1, max_length=50, description="Unique course code")


class CourseUpdateRequest(BaseModel):
    """Partial course update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    code: str | None = Field(default=None, min_length=1, max_length=50)


class CourseResponse(BaseModel):
    """Course details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: str
    created_at: datetime
    updated_at: datetime
