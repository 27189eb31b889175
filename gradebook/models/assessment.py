# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment request and response models.

Request fields are deliberately loose; range and presence checks live in
AssessmentService so direct callers get the same errors as HTTP clients.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AssessmentCreateRequest(BaseModel):
    """Request to create an assessment in a course."""

    name: str | None = Field(default=None, description="Assessment name")
    weight: Any = Field(default=None, description="Maximum score, a number from 0 to 100")


class AssessmentUpdateRequest(BaseModel):
    """Partial assessment update."""

    name: str | None = None
    weight: Any = None

    def has_changes(self) -> bool:
        """Check whether any field was supplied."""
        return bool(self.model_fields_set & {"name", "weight"})


class AssessmentResponse(BaseModel):
    """Assessment details."""

    id: int
    course_id: int
    author_id: int | None
    name: str
    weight: float
    created_at: datetime
    updated_at: datetime
