# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student self-service endpoints.

- GET /me/assessments/{assessment_id}/score - Own score, or null when ungraded
- GET /me/scores - All own scores with assessment and course
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gradebook.api.dependencies import get_db, require_student, to_http_exception
from gradebook.api.middleware.auth import CurrentUser
from gradebook.core.errors import GradebookError
from gradebook.domains.score.service import ScoreLedgerService
from gradebook.models.common import ApiResponse
from gradebook.models.score import MyScoreItem, MyScoreResponse

router = APIRouter()


@router.get(
    "/me/assessments/{assessment_id}/score",
    response_model=ApiResponse[MyScoreResponse],
    summary="Get my score",
)
async def get_my_score(
    assessment_id: int,
    current_user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[MyScoreResponse]:
    """Get the caller's score on one assessment."""
    try:
        score = await ScoreLedgerService(db).get_my_score(current_user.id, assessment_id)
    except GradebookError as e:
        raise to_http_exception(e) from e

    message = "Score retrieved successfully." if score.graded else "Not graded yet."
    return ApiResponse(message=message, data=score)


@router.get(
    "/me/scores",
    response_model=ApiResponse[list[MyScoreItem]],
    summary="List my scores",
)
async def list_my_scores(
    current_user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[list[MyScoreItem]]:
    """List all of the caller's recorded scores."""
    try:
        scores = await ScoreLedgerService(db).list_my_scores(current_user.id)
    except GradebookError as e:
        raise to_http_exception(e) from e

    return ApiResponse(message="Scores retrieved successfully.", data=scores)
