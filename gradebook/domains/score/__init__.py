# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Score ledger."""

from gradebook.domains.score.service import (
    ScoreAccessDeniedError,
    ScoreConflictError,
    ScoreLedgerService,
    ScoreServiceError,
    ScoreValidationError,
    StudentNotFoundError,
    parse_score,
    parse_student_id,
)

__all__ = [
    "ScoreLedgerService",
    "ScoreServiceError",
    "ScoreValidationError",
    "ScoreAccessDeniedError",
    "ScoreConflictError",
    "StudentNotFoundError",
    "parse_score",
    "parse_student_id",
]
