# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the HTTP API.

Requests go through the full middleware stack with an httpx ASGI
transport; the request-scoped session dependency is pointed at the test
database.
"""

from collections.abc import AsyncGenerator
from datetime import timedelta

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from gradebook.api.app import create_app
from gradebook.api.dependencies import get_db
from gradebook.core.config import get_settings
from gradebook.domains.auth.tokens import TokenVerifier
from gradebook.infrastructure.database.models import UserRole


@pytest.fixture
def app(sessionmaker) -> FastAPI:
    """Create the application bound to the test database."""
    application = create_app()

    async def override_get_db() -> AsyncGenerator:
        async with sessionmaker() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http


@pytest.fixture
def auth():
    """Build an Authorization header for a user id and role."""
    verifier = TokenVerifier(get_settings().jwt)

    def _headers(user_id: int, role: UserRole, expires_in: timedelta | None = None) -> dict[str, str]:
        token = verifier.create_token(user_id, role, expires_in=expires_in)
        return {"Authorization": f"Bearer {token}"}

    return _headers


class TestHealth:
    """Tests for the health endpoint."""

    async def test_health_is_public(self, client):
        """Test health answers without a token."""
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] in {"healthy", "degraded"}
        assert body["environment"] == "test"
        assert "X-Request-ID" in response.headers


class TestAuthentication:
    """Tests for token and role gates."""

    async def test_missing_token(self, client, school):
        """Test requests without a token are rejected."""
        response = await client.get(f"/api/v1/assessments/{school.quiz_id}/scores")

        assert response.status_code == 401
        assert response.json() == {"message": "Not authorized, no token"}

    async def test_expired_token(self, client, school, auth):
        """Test expired tokens count as no token."""
        headers = auth(school.teacher_a_id, UserRole.TEACHER, expires_in=timedelta(seconds=-5))

        response = await client.get(f"/api/v1/assessments/{school.quiz_id}/scores", headers=headers)

        assert response.status_code == 401

    async def test_inactive_account(self, client, school, auth):
        """Test a valid token for an inactive user is rejected."""
        headers = auth(school.inactive_teacher_id, UserRole.TEACHER)

        response = await client.get(f"/api/v1/assessments/{school.quiz_id}/scores", headers=headers)

        assert response.status_code == 401

    async def test_role_mismatch(self, client, school, auth):
        """Test a token claiming another role than the account holds."""
        headers = auth(school.student_ids[0], UserRole.TEACHER)

        response = await client.get(f"/api/v1/assessments/{school.quiz_id}/scores", headers=headers)

        assert response.status_code == 401

    async def test_wrong_role(self, client, school, auth):
        """Test a student calling a teacher endpoint."""
        headers = auth(school.student_ids[0], UserRole.STUDENT)

        response = await client.get(f"/api/v1/assessments/{school.quiz_id}/scores", headers=headers)

        assert response.status_code == 403
        assert "TEACHER" in response.json()["message"]


class TestScoreSubmissionApi:
    """Tests for POST /assessments/{id}/scores."""

    async def test_submit_and_resubmit(self, client, school, auth):
        """Test creation counts, then an identical resubmission."""
        headers = auth(school.teacher_a_id, UserRole.TEACHER)
        s1, s2, _ = school.student_ids
        payload = {"scores": [{"student_id": s1, "score": 18}, {"student_id": s2, "score": 15.5}]}

        first = await client.post(f"/api/v1/assessments/{school.quiz_id}/scores", json=payload, headers=headers)
        second = await client.post(f"/api/v1/assessments/{school.quiz_id}/scores", json=payload, headers=headers)

        assert first.status_code == 200
        assert first.json() == {
            "message": "Scores submitted successfully. 2 created, 0 updated.",
            "data": {"createdCount": 2, "updatedCount": 0},
        }
        assert second.json()["data"] == {"createdCount": 0, "updatedCount": 0}

    async def test_score_above_weight(self, client, school, auth):
        """Test the whole batch fails with a 400 naming the entry."""
        headers = auth(school.teacher_a_id, UserRole.TEACHER)
        s1, s2, _ = school.student_ids
        payload = {"scores": [{"student_id": s1, "score": 10}, {"student_id": s2, "score": 25}]}

        response = await client.post(f"/api/v1/assessments/{school.quiz_id}/scores", json=payload, headers=headers)
        listing = await client.get(f"/api/v1/assessments/{school.quiz_id}/scores", headers=headers)

        assert response.status_code == 400
        assert response.json() == {"message": f"Score 25.00 for student ID {s2} exceeds max score of 20.00."}
        assert listing.json()["data"] == []

    @pytest.mark.parametrize("payload", [{}, {"scores": []}])
    async def test_empty_batch(self, client, school, auth, payload):
        """Test empty batches are rejected."""
        headers = auth(school.teacher_a_id, UserRole.TEACHER)

        response = await client.post(f"/api/v1/assessments/{school.quiz_id}/scores", json=payload, headers=headers)

        assert response.status_code == 400
        assert response.json() == {"message": "Scores data must be a non-empty array."}

    async def test_malformed_body(self, client, school, auth):
        """Test a body that is not a batch is a 400."""
        headers = auth(school.teacher_a_id, UserRole.TEACHER)

        response = await client.post(
            f"/api/v1/assessments/{school.quiz_id}/scores", json={"scores": "all of them"}, headers=headers
        )

        assert response.status_code == 400

    async def test_unassigned_teacher(self, client, school, auth):
        """Test a teacher outside the course gets 403."""
        headers = auth(school.teacher_b_id, UserRole.TEACHER)
        payload = {"scores": [{"student_id": school.student_ids[0], "score": 5}]}

        response = await client.post(f"/api/v1/assessments/{school.quiz_id}/scores", json=payload, headers=headers)

        assert response.status_code == 403

    async def test_missing_assessment(self, client, school, auth):
        """Test an unknown assessment gets 404."""
        headers = auth(school.teacher_a_id, UserRole.TEACHER)
        payload = {"scores": [{"student_id": school.student_ids[0], "score": 5}]}

        response = await client.post("/api/v1/assessments/9999/scores", json=payload, headers=headers)

        assert response.status_code == 404
        assert response.json() == {"message": "Assessment not found."}


class TestCourseAdministrationApi:
    """Tests for admin course and assignment endpoints."""

    async def test_create_course(self, client, school, auth):
        """Test an admin creates a course."""
        headers = auth(school.admin_id, UserRole.ADMIN)

        response = await client.post("/api/v1/courses", json={"name": "Biology", "code": "BIO-101"}, headers=headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Course created successfully"
        assert body["data"]["code"] == "BIO-101"

    async def test_teacher_cannot_create_course(self, client, school, auth):
        """Test course administration is admin only."""
        headers = auth(school.teacher_a_id, UserRole.TEACHER)

        response = await client.post("/api/v1/courses", json={"name": "Biology", "code": "BIO-101"}, headers=headers)

        assert response.status_code == 403

    async def test_any_role_reads_course(self, client, school, auth):
        """Test course details are readable by every role."""
        headers = auth(school.student_ids[0], UserRole.STUDENT)

        response = await client.get(f"/api/v1/courses/{school.math_course_id}", headers=headers)
        missing = await client.get("/api/v1/courses/9999", headers=headers)

        assert response.status_code == 200
        assert response.json()["data"]["code"] == "MATH-101"
        assert missing.status_code == 404
        assert missing.json() == {"message": "Course with ID 9999 not found."}

    async def test_assign_and_duplicate(self, client, school, auth):
        """Test assignment and the 409 on a duplicate."""
        headers = auth(school.admin_id, UserRole.ADMIN)
        url = f"/api/v1/courses/{school.history_course_id}/teachers"

        first = await client.post(url, json={"teacher_id": school.teacher_b_id}, headers=headers)
        second = await client.post(url, json={"teacher_id": school.teacher_b_id}, headers=headers)

        assert first.status_code == 201
        assert first.json()["message"] == "Teacher assigned to course successfully"
        assert second.status_code == 409

    async def test_assign_unknown_teacher(self, client, school, auth):
        """Test assigning an id that is not a teacher."""
        headers = auth(school.admin_id, UserRole.ADMIN)

        response = await client.post(
            f"/api/v1/courses/{school.math_course_id}/teachers",
            json={"teacher_id": school.student_ids[0]},
            headers=headers,
        )

        assert response.status_code == 404

    async def test_unassign(self, client, school, auth):
        """Test removing an assignment."""
        headers = auth(school.admin_id, UserRole.ADMIN)
        url = f"/api/v1/courses/{school.math_course_id}/teachers/{school.teacher_a_id}"

        first = await client.delete(url, headers=headers)
        second = await client.delete(url, headers=headers)

        assert first.status_code == 200
        assert first.json()["message"] == "Teacher removed from course successfully"
        assert second.status_code == 404


class TestAssessmentApi:
    """Tests for assessment endpoints."""

    async def test_create_assessment(self, client, school, auth):
        """Test an assigned teacher creates an assessment."""
        headers = auth(school.teacher_a_id, UserRole.TEACHER)

        response = await client.post(
            f"/api/v1/courses/{school.math_course_id}/assessments",
            json={"name": "Final", "weight": 40},
            headers=headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["weight"] == 40.0

    async def test_create_assessment_missing_fields(self, client, school, auth):
        """Test name and weight are required."""
        headers = auth(school.teacher_a_id, UserRole.TEACHER)

        response = await client.post(
            f"/api/v1/courses/{school.math_course_id}/assessments",
            json={"name": "Final"},
            headers=headers,
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Assessment name and weight are required."}

    async def test_weight_must_be_a_json_number(self, client, school, auth):
        """Test a numeric string weight is rejected on create and update."""
        headers = auth(school.teacher_a_id, UserRole.TEACHER)

        created = await client.post(
            f"/api/v1/courses/{school.math_course_id}/assessments",
            json={"name": "Final", "weight": "20"},
            headers=headers,
        )
        updated = await client.put(
            f"/api/v1/assessments/{school.quiz_id}",
            json={"weight": "20"},
            headers=headers,
        )

        assert created.status_code == 400
        assert created.json() == {"message": "Weight must be a number between 0 and 100."}
        assert updated.status_code == 400
        assert updated.json() == {"message": "Weight must be a number between 0 and 100."}

    async def test_student_lists_assessments(self, client, school, auth):
        """Test students may list a course's assessments."""
        headers = auth(school.student_ids[0], UserRole.STUDENT)

        response = await client.get(f"/api/v1/courses/{school.math_course_id}/assessments", headers=headers)

        assert response.status_code == 200
        assert response.json()["message"] == f"Assessments for course ID {school.math_course_id} retrieved successfully"
        assert [a["name"] for a in response.json()["data"]] == ["Quiz 1"]

    async def test_update_and_delete(self, client, school, auth):
        """Test editing and then deleting an assessment."""
        headers = auth(school.teacher_a_id, UserRole.TEACHER)
        url = f"/api/v1/assessments/{school.quiz_id}"

        updated = await client.put(url, json={"weight": 25}, headers=headers)
        deleted = await client.delete(url, headers=headers)
        missing = await client.get(url, headers=headers)

        assert updated.status_code == 200
        assert updated.json()["data"]["weight"] == 25.0
        assert deleted.status_code == 200
        assert missing.status_code == 404


class TestTeacherApi:
    """Tests for teacher self-service endpoints."""

    async def test_my_courses(self, client, school, auth):
        """Test a teacher lists the courses they are assigned to."""
        response = await client.get("/api/v1/teachers/me/courses", headers=auth(school.teacher_a_id, UserRole.TEACHER))

        assert response.status_code == 200
        assert [c["course_id"] for c in response.json()["data"]] == [school.math_course_id]
        assert response.json()["data"][0]["code"] == "MATH-101"

    async def test_my_courses_requires_teacher(self, client, school, auth):
        """Test students cannot list teacher courses."""
        response = await client.get(
            "/api/v1/teachers/me/courses", headers=auth(school.student_ids[0], UserRole.STUDENT)
        )

        assert response.status_code == 403


class TestStudentApi:
    """Tests for student self-service endpoints."""

    async def test_own_score(self, client, school, auth):
        """Test a student reads their score before and after grading."""
        teacher = auth(school.teacher_a_id, UserRole.TEACHER)
        student = auth(school.student_ids[0], UserRole.STUDENT)
        url = f"/api/v1/students/me/assessments/{school.quiz_id}/score"

        before = await client.get(url, headers=student)
        await client.post(
            f"/api/v1/assessments/{school.quiz_id}/scores",
            json={"scores": [{"student_id": school.student_ids[0], "score": 17}]},
            headers=teacher,
        )
        after = await client.get(url, headers=student)

        assert before.json() == {
            "message": "Not graded yet.",
            "data": {"assessment_id": school.quiz_id, "score": None, "graded": False},
        }
        assert after.json()["data"]["score"] == 17.0

    async def test_score_report(self, client, school, auth):
        """Test the student's report lists graded assessments."""
        teacher = auth(school.teacher_a_id, UserRole.TEACHER)
        student = auth(school.student_ids[1], UserRole.STUDENT)
        await client.post(
            f"/api/v1/assessments/{school.quiz_id}/scores",
            json={"scores": [{"student_id": school.student_ids[1], "score": 11}]},
            headers=teacher,
        )

        response = await client.get("/api/v1/students/me/scores", headers=student)

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data) == 1
        assert data[0]["course_code"] == "MATH-101"
        assert data[0]["score"] == 11.0
