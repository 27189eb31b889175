# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment catalog."""

from gradebook.domains.assessment.service import (
    AssessmentAccessDeniedError,
    AssessmentNotFoundError,
    AssessmentService,
    AssessmentServiceError,
    AssessmentValidationError,
    parse_weight,
)

__all__ = [
    "AssessmentService",
    "AssessmentServiceError",
    "AssessmentValidationError",
    "AssessmentNotFoundError",
    "AssessmentAccessDeniedError",
    "parse_weight",
]
