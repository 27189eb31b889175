# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment registry: the teacher-course relation."""

from gradebook.domains.assignment.service import (
    AlreadyAssignedError,
    AssignmentServiceError,
    NotAssignedError,
    TeacherAssignmentService,
    TeacherNotFoundError,
)

__all__ = [
    "TeacherAssignmentService",
    "AssignmentServiceError",
    "AlreadyAssignedError",
    "NotAssignedError",
    "TeacherNotFoundError",
]
