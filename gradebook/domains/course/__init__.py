# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course domain."""

from gradebook.domains.course.service import (
    CourseCodeExistsError,
    CourseNotFoundError,
    CourseService,
    CourseServiceError,
)

__all__ = [
    "CourseService",
    "CourseServiceError",
    "CourseNotFoundError",
    "CourseCodeExistsError",
]
