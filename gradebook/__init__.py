"""School Gradebook Backend.

Grade-authority service: teacher course assignments, course-scoped
authorization, assessment catalog, and the atomic score ledger.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
