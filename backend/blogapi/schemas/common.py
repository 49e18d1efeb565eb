"""
Blog API — Shared Response Schemas
===================================

What:  Envelope and error shapes shared by every endpoint, plus the health payload.
Who:   Route decorators (`responses=`) for OpenAPI docs; the dispatcher builds
       bodies of exactly these shapes.

Envelopes:
    success: {"result": 200, "data": <resource or list>}
    error:   {"errors": [{"field", "location", "message"}, ...], "request_id": "..."}
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class Envelope(BaseModel):
    result: int = Field(default=200, description="Mirrors the HTTP status of a successful call")
    data: Any = Field(description="Resource, list of resources, or login payload")


class ErrorItem(BaseModel):
    field: Optional[str] = Field(default=None, description="Offending input field, if any")
    location: Optional[str] = Field(default=None, description="'body', 'params' or 'query'")
    message: str = Field(description="Human-readable description")


class ErrorResponse(BaseModel):
    """
    Example:
        {
            "errors": [{"field": "name", "location": "body", "message": "name is required"}],
            "request_id": "1f2e3d4c"
        }
    """
    errors: List[ErrorItem] = Field(description="Ordered error descriptors")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
