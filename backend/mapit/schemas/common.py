"""
MapIt Backend: Shared Envelope Schemas
========================================

What:  Response models shared by every route: the error envelope, the plain
       message envelope, and the database connectivity check.

Every JSON body has a boolean `success`. Failures add `error` (stable string
clients can branch on) and, optionally, `message` (free text detail).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error envelope for all API errors.

    Example:
        {
            "success": false,
            "error": "Server error",
            "message": "relation \\"map\\" does not exist"
        }
    """
    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(description="Machine-stable error string")
    message: Optional[str] = Field(default=None, description="Human-readable detail")


class MessageResponse(BaseModel):
    """Success envelope carrying only a message (e.g. after a delete)."""
    success: bool = True
    message: str


class DatabaseCheckResponse(BaseModel):
    """
    What:  Successful answer of GET /test-db.
    How:   Serialized with camelCase keys (`hasDbUrl`, `currentTime`).
    """
    success: bool = True
    message: str = Field(default="Database connection successful")
    has_db_url: bool = Field(default=True, alias="hasDbUrl")
    current_time: datetime = Field(alias="currentTime", description="Database server time")

    model_config = {"populate_by_name": True}


class DatabaseCheckError(BaseModel):
    """Failed answer of GET /test-db (HTTP 500)."""
    success: bool = False
    error: str
    has_db_url: bool = Field(alias="hasDbUrl")

    model_config = {"populate_by_name": True}
