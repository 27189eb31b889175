# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher self-service endpoints.

- GET /me/courses - Courses the caller is assigned to teach
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gradebook.api.dependencies import get_db, require_teacher
from gradebook.api.middleware.auth import CurrentUser
from gradebook.domains.assignment.service import TeacherAssignmentService
from gradebook.models.assignment import AssignedCourse
from gradebook.models.common import ApiResponse

router = APIRouter()


@router.get(
    "/me/courses",
    response_model=ApiResponse[list[AssignedCourse]],
    summary="List my courses",
)
async def list_my_courses(
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[AssignedCourse]]:
    """List the courses whose assessments and scores the caller may manage."""
    courses = await TeacherAssignmentService(db).list_for_teacher(current_user.id)
    return ApiResponse(message="Assigned courses retrieved successfully.", data=courses)
