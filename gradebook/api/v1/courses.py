# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course API endpoints.

Course administration (admin only):
- POST / - Create a course
- GET /{course_id} - Get course details (any role)
- PUT /{course_id} - Update course
- DELETE /{course_id} - Delete course with its assessments, scores and assignments

Teacher assignment endpoints (admin only):
- POST /{course_id}/teachers - Assign a teacher
- GET /{course_id}/teachers - List assigned teachers
- DELETE /{course_id}/teachers/{teacher_id} - Remove assignment

Course assessment endpoints:
- POST /{course_id}/assessments - Create an assessment (assigned teacher)
- GET /{course_id}/assessments - List assessments (assigned teacher or student)
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from gradebook.api.dependencies import (
    get_db,
    require_admin,
    require_any_role,
    require_teacher,
    require_teacher_or_student,
    to_http_exception,
)
from gradebook.api.middleware.auth import CurrentUser
from gradebook.core.errors import GradebookError
from gradebook.domains.assessment.service import AssessmentService
from gradebook.domains.assignment.service import TeacherAssignmentService
from gradebook.domains.course.service import CourseService
from gradebook.models.assessment import AssessmentCreateRequest, AssessmentResponse
from gradebook.models.assignment import (
    AssignTeacherRequest,
    TeacherAssignmentResponse,
    TeacherSummary,
)
from gradebook.models.common import ApiResponse
from gradebook.models.course import CourseCreateRequest, CourseResponse, CourseUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


# =========================================================================
# Courses
# =========================================================================


@router.post(
    "",
    response_model=ApiResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
    description="Create a course with a unique code. Requires admin access.",
)
async def create_course(
    data: CourseCreateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CourseResponse]:
    """Create a new course."""
    try:
        course = await CourseService(db).create_course(data, created_by=current_user.id)
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Course created successfully", data=course)


@router.get(
    "/{course_id}",
    response_model=ApiResponse[CourseResponse],
    summary="Get course",
)
async def get_course(
    course_id: int,
    current_user: CurrentUser = Depends(require_any_role),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CourseResponse]:
    """Get course details."""
    try:
        course = await CourseService(db).get_course(course_id)
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Course retrieved successfully", data=course)


@router.put(
    "/{course_id}",
    response_model=ApiResponse[CourseResponse],
    summary="Update course",
    description="Update a course's name or code. Requires admin access.",
)
async def update_course(
    course_id: int,
    data: CourseUpdateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CourseResponse]:
    """Update a course."""
    try:
        course = await CourseService(db).update_course(course_id, data, updated_by=current_user.id)
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Course updated successfully", data=course)


@router.delete(
    "/{course_id}",
    response_model=ApiResponse[None],
    summary="Delete course",
    description=(
        "Delete a course together with its assessments, their scores and its "
        "teacher assignments. Requires admin access."
    ),
)
async def delete_course(
    course_id: int,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    """Delete a course and everything it owns."""
    try:
        await CourseService(db).delete_course(course_id, deleted_by=current_user.id)
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Course deleted successfully.")


# =========================================================================
# Teacher assignments
# =========================================================================


@router.post(
    "/{course_id}/teachers",
    response_model=ApiResponse[TeacherAssignmentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Assign teacher",
    description="Assign a teacher to a course. Requires admin access.",
)
async def assign_teacher(
    course_id: int,
    data: AssignTeacherRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[TeacherAssignmentResponse]:
    """Assign a teacher to a course."""
    logger.info(
        "Assigning teacher %s to course %s by %s",
        data.teacher_id,
        course_id,
        current_user.id,
    )

    try:
        assignment = await TeacherAssignmentService(db).assign(
            course_id=course_id,
            teacher_id=data.teacher_id,
            assigned_by=current_user.id,
        )
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Teacher assigned to course successfully", data=assignment)


@router.get(
    "/{course_id}/teachers",
    response_model=ApiResponse[list[TeacherSummary]],
    summary="List course teachers",
)
async def list_course_teachers(
    course_id: int,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[TeacherSummary]]:
    """List teachers assigned to a course."""
    try:
        teachers = await TeacherAssignmentService(db).list_for_course(course_id)
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Course teachers retrieved successfully", data=teachers)


@router.delete(
    "/{course_id}/teachers/{teacher_id}",
    response_model=ApiResponse[None],
    summary="Remove teacher assignment",
    description=(
        "Remove a teacher from a course. Assessments the teacher authored stay "
        "with the course. Requires admin access."
    ),
)
async def unassign_teacher(
    course_id: int,
    teacher_id: int,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    """Remove a teacher from a course."""
    try:
        await TeacherAssignmentService(db).unassign(
            course_id=course_id,
            teacher_id=teacher_id,
            removed_by=current_user.id,
        )
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Teacher removed from course successfully")


# =========================================================================
# Course assessments
# =========================================================================


@router.post(
    "/{course_id}/assessments",
    response_model=ApiResponse[AssessmentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create assessment",
    description="Create an assessment in a course the teacher is assigned to.",
)
async def create_assessment(
    course_id: int,
    data: AssessmentCreateRequest,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AssessmentResponse]:
    """Create an assessment."""
    try:
        assessment = await AssessmentService(db).create(
            course_id=course_id,
            author_teacher_id=current_user.id,
            name=data.name,
            weight=data.weight,
        )
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Assessment created successfully", data=assessment)


@router.get(
    "/{course_id}/assessments",
    response_model=ApiResponse[list[AssessmentResponse]],
    summary="List course assessments",
    description="Teachers must be assigned to the course; students may list any course.",
)
async def list_course_assessments(
    course_id: int,
    current_user: CurrentUser = Depends(require_teacher_or_student),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[AssessmentResponse]]:
    """List a course's assessments."""
    try:
        assessments = await AssessmentService(db).list_for_course(
            course_id=course_id,
            caller_id=current_user.id,
            caller_role=current_user.role,
        )
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(
        message=f"Assessments for course ID {course_id} retrieved successfully",
        data=assessments,
    )
