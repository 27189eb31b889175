# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

Dependencies are used to:
- Get a request-scoped database session
- Get the authenticated caller and enforce role gates

Example:
    @router.get("/assessments/{assessment_id}")
    async def get_assessment(
        db: AsyncSession = Depends(get_db),
        current_user: CurrentUser = Depends(require_teacher),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from gradebook.api.middleware.auth import CurrentUser, get_current_user
from gradebook.core.config import get_settings
from gradebook.core.errors import GradebookError
from gradebook.domains.identity.service import IdentityDirectory
from gradebook.infrastructure.database.connection import (
    close_database,
    create_tables,
    get_sessionmaker,
    init_database,
)
from gradebook.infrastructure.database.models import UserRole

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """Initialize the database connection pool."""
    settings = get_settings()
    await init_database(settings)

    if settings.database.create_tables:
        await create_tables()
        logger.info("Database tables ensured")


async def close_db() -> None:
    """Close the database connection pool."""
    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the current request.

    Services commit explicitly; anything left uncommitted when the request
    fails is rolled back.

    Yields:
        AsyncSession for the request.
    """
    sessionmaker = get_sessionmaker()

    async with sessionmaker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# =========================================================================
# Authentication Dependencies
# =========================================================================


async def require_auth(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Require an authenticated caller who is still an active user.

    Args:
        request: HTTP request.
        db: Database session.

    Returns:
        CurrentUser.

    Raises:
        HTTPException: If not authenticated or the account is no longer active.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, no token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    account = await IdentityDirectory(db).find_active(user.id)
    if not account or account.role != user.role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, user not found or inactive",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


class RequireRole:
    """Dependency for requiring one of a set of roles.

    Example:
        @router.get("/courses/{course_id}/assessments")
        async def list_assessments(
            user: CurrentUser = Depends(RequireRole(UserRole.TEACHER, UserRole.STUDENT)),
        ):
            ...
    """

    def __init__(self, *roles: UserRole) -> None:
        """Initialize role requirement.

        Args:
            roles: Accepted roles (any of these).
        """
        self.roles = roles

    async def __call__(self, user: CurrentUser = Depends(require_auth)) -> CurrentUser:
        """Check the caller's role and return the caller.

        Raises:
            HTTPException: If the caller has none of the accepted roles.
        """
        if user.role not in self.roles:
            accepted = ", ".join(role.value for role in self.roles)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User role {user.role.value} is not authorized to access this route. "
                f"Requires: {accepted}",
            )
        return user


def to_http_exception(error: GradebookError) -> HTTPException:
    """Translate a domain error into the HTTP error for its kind.

    Args:
        error: Error raised by a domain service.

    Returns:
        HTTPException carrying the kind's status code and the error message.
    """
    if error.status_code >= 500:
        logger.error("Request failed: %s (retryable=%s)", error, error.retryable)
    return HTTPException(status_code=error.status_code, detail=error.message)


require_admin = RequireRole(UserRole.ADMIN)
require_teacher = RequireRole(UserRole.TEACHER)
require_student = RequireRole(UserRole.STUDENT)
require_teacher_or_student = RequireRole(UserRole.TEACHER, UserRole.STUDENT)
require_any_role = RequireRole(UserRole.ADMIN, UserRole.TEACHER, UserRole.STUDENT)
