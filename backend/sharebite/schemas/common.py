"""
ShareBite Backend — Shared Response Schemas
=============================================

What:  Pydantic models for responses that are not tied to one resource:
       write acknowledgements, errors, liveness and health.
Why:   The frontend checks `success` / `insertedId` on writes and
       `error` / `message` on failures, so those shapes are fixed here.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class InsertResponse(BaseModel):
    """
    Returned with 201 after a listing or food request is created.

    Field name is camelCase on the wire (`insertedId`) for client compatibility.
    """
    success: bool = Field(default=True)
    insertedId: str = Field(description="Server-generated identifier of the new record")


class MutationResponse(BaseModel):
    """Returned after an update or delete."""
    success: bool = Field(default=True)
    message: str = Field(description="Human-readable outcome, e.g. 'Food updated'")


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-2xx response.

    Example:
        {
            "error": "forbidden",
            "message": "You can only modify your own food listings",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class LivenessResponse(BaseModel):
    """GET / — the process is up. Does not touch the database."""
    message: str
    timestamp: datetime


class HealthResponse(BaseModel):
    """GET /health — process plus database reachability."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
