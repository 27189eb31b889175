# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services.

- identity: user id to role and status
- auth: bearer token verification
- course: course administration
- assignment: teacher-course assignment registry
- authorization: course-scoped authorization checks
- assessment: assessment catalog
- score: score ledger
"""
