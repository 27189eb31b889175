# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration test fixtures.

Every test gets its own file-backed SQLite database so that separate
sessions (and concurrent transactions) see each other's commits the way
they would against PostgreSQL.
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from gradebook.infrastructure.database.connection import create_engine_for_url, create_sessionmaker
from gradebook.infrastructure.database.models import (
    Assessment,
    Base,
    Course,
    CourseTeacher,
    User,
    UserRole,
)
from gradebook.utils.datetime import utc_now


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Mark everything under tests/integration as an integration test."""
    for item in items:
        if "integration" in str(item.path):
            item.add_marker(pytest.mark.integration)


@dataclass
class School:
    """Ids of the seeded fixture data."""

    admin_id: int
    teacher_a_id: int
    teacher_b_id: int
    inactive_teacher_id: int
    student_ids: list[int]
    archived_student_id: int
    math_course_id: int
    history_course_id: int
    quiz_id: int


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh SQLite database with the full schema."""
    engine = create_engine_for_url(f"sqlite+aiosqlite:///{tmp_path / 'gradebook.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a sessionmaker bound to the test database."""
    return create_sessionmaker(engine)


@pytest_asyncio.fixture
async def db_session(
    sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for the test body."""
    async with sessionmaker() as session:
        yield session


@pytest_asyncio.fixture
async def school(sessionmaker: async_sessionmaker[AsyncSession]) -> School:
    """Seed users, two courses, one assignment and one assessment.

    - teacher A is assigned to Mathematics, teacher B to nothing
    - the Mathematics course has a quiz with weight 20
    - one inactive teacher and one archived student exist but are unusable
    """
    async with sessionmaker() as session:
        admin = User(username="admin", full_name="School Admin", role=UserRole.ADMIN.value)
        teacher_a = User(username="teacher.a", full_name="Ada Teacher", role=UserRole.TEACHER.value)
        teacher_b = User(username="teacher.b", full_name="Ben Teacher", role=UserRole.TEACHER.value)
        inactive_teacher = User(
            username="teacher.gone",
            full_name="Former Teacher",
            role=UserRole.TEACHER.value,
            is_active=False,
        )
        students = [
            User(username=f"student.{i}", full_name=f"Student {i}", role=UserRole.STUDENT.value)
            for i in range(1, 4)
        ]
        archived_student = User(
            username="student.archived",
            full_name="Archived Student",
            role=UserRole.STUDENT.value,
            archived_at=utc_now(),
        )
        math = Course(name="Mathematics", code="MATH-101")
        history = Course(name="History", code="HIST-101")

        session.add_all([admin, teacher_a, teacher_b, inactive_teacher, *students, archived_student, math, history])
        await session.flush()

        session.add(CourseTeacher(teacher_id=teacher_a.id, course_id=math.id, assigned_by=admin.id))
        quiz = Assessment(course_id=math.id, author_id=teacher_a.id, name="Quiz 1", weight=Decimal("20.00"))
        session.add(quiz)
        await session.commit()

        return School(
            admin_id=admin.id,
            teacher_a_id=teacher_a.id,
            teacher_b_id=teacher_b.id,
            inactive_teacher_id=inactive_teacher.id,
            student_ids=[s.id for s in students],
            archived_student_id=archived_student.id,
            math_course_id=math.id,
            history_course_id=history.id,
            quiz_id=quiz.id,
        )
