# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment and score API endpoints.

All endpoints require a teacher assigned to the assessment's course:
- GET /{assessment_id} - Get assessment details
- PUT /{assessment_id} - Update name and/or weight
- DELETE /{assessment_id} - Delete assessment and its scores
- POST /{assessment_id}/scores - Submit a batch of scores atomically
- GET /{assessment_id}/scores - List recorded scores
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gradebook.api.dependencies import get_db, require_teacher, to_http_exception
from gradebook.api.middleware.auth import CurrentUser
from gradebook.core.errors import GradebookError
from gradebook.domains.assessment.service import AssessmentService
from gradebook.domains.score.service import ScoreLedgerService
from gradebook.models.assessment import AssessmentResponse, AssessmentUpdateRequest
from gradebook.models.common import ApiResponse
from gradebook.models.score import ScoreBatchRequest, ScoreBatchResult, StudentScoreResponse

router = APIRouter()


@router.get(
    "/{assessment_id}",
    response_model=ApiResponse[AssessmentResponse],
    summary="Get assessment",
)
async def get_assessment(
    assessment_id: int,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AssessmentResponse]:
    """Get assessment details."""
    try:
        assessment = await AssessmentService(db).get(assessment_id, current_user.id)
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Assessment retrieved successfully", data=assessment)


@router.put(
    "/{assessment_id}",
    response_model=ApiResponse[AssessmentResponse],
    summary="Update assessment",
    description=(
        "Any teacher assigned to the course may edit. The weight cannot drop "
        "below a score already recorded while the weight ceiling is enforced."
    ),
)
async def update_assessment(
    assessment_id: int,
    data: AssessmentUpdateRequest,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AssessmentResponse]:
    """Update an assessment."""
    try:
        assessment = await AssessmentService(db).update(assessment_id, current_user.id, data)
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Assessment updated successfully", data=assessment)


@router.delete(
    "/{assessment_id}",
    response_model=ApiResponse[None],
    summary="Delete assessment",
    description="Delete an assessment and all of its scores.",
)
async def delete_assessment(
    assessment_id: int,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    """Delete an assessment."""
    try:
        await AssessmentService(db).delete(assessment_id, current_user.id)
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Assessment deleted successfully.")


@router.post(
    "/{assessment_id}/scores",
    response_model=ApiResponse[ScoreBatchResult],
    summary="Submit scores",
    description=(
        "Create or update scores for many students in one all-or-nothing "
        "transaction. A 500 response is safe to retry unchanged."
    ),
)
async def submit_scores(
    assessment_id: int,
    data: ScoreBatchRequest,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ScoreBatchResult]:
    """Submit a batch of scores."""
    try:
        result = await ScoreLedgerService(db).submit_batch(
            assessment_id=assessment_id,
            caller_teacher_id=current_user.id,
            entries=data.scores,
        )
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(
        message=(
            f"Scores submitted successfully. {result.created_count} created, "
            f"{result.updated_count} updated."
        ),
        data=result,
    )


@router.get(
    "/{assessment_id}/scores",
    response_model=ApiResponse[list[StudentScoreResponse]],
    summary="List scores",
)
async def list_scores(
    assessment_id: int,
    current_user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[StudentScoreResponse]]:
    """List recorded scores for an assessment."""
    try:
        scores = await ScoreLedgerService(db).get_for_assessment(assessment_id, current_user.id)
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Scores retrieved successfully.", data=scores)
