# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    courses: Course administration, teacher assignments and course assessments.
    assessments: Assessment management and score submission.
    students: Student self-service score reads.
    teachers: Teacher self-service course listing.
"""

from fastapi import APIRouter

from gradebook.api.v1 import assessments, courses, students, teachers
from gradebook.models.common import ErrorResponse

ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse}
    for status_code in (400, 401, 403, 404, 409, 500)
}

router = APIRouter(prefix="/api/v1", responses=ERROR_RESPONSES)

router.include_router(courses.router, prefix="/courses", tags=["Courses"])
router.include_router(assessments.router, prefix="/assessments", tags=["Assessments"])
router.include_router(students.router, prefix="/students", tags=["Students"])
router.include_router(teachers.router, prefix="/teachers", tags=["Teachers"])

__all__ = ["router"]
