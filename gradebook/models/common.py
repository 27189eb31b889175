# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Response envelopes shared by every endpoint.

Successful responses wrap their payload as ``{"message": ..., "data": ...}``;
failures carry only ``{"message": ...}``.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """Success envelope."""

    message: str = Field(description="Human-readable outcome")
    data: DataT | None = Field(default=None, description="Operation payload")


class ErrorResponse(BaseModel):
    """Error envelope."""

    message: str = Field(description="Human-readable error description")
