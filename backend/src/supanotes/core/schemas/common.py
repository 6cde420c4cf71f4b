"""
Shared schemas - health payload and form error helpers
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError


def field_errors(
    exc: ValidationError,
    messages: Mapping[str, str],
    overrides: Optional[Mapping[tuple[str, str], str]] = None,
) -> dict[str, str]:
    """Map a pydantic error to one message per form field.

    Only fields listed in ``messages`` are reported, with the message given
    there, so raw validator text never reaches a page. ``overrides`` is keyed
    by ``(field, pydantic error type)`` for failures that need their own
    wording, e.g. ``("title", "string_too_long")``.
    """
    overrides = overrides or {}
    errors: dict[str, str] = {}
    for error in exc.errors():
        if not error["loc"]:
            continue
        field = str(error["loc"][0])
        if field in messages and field not in errors:
            errors[field] = overrides.get((field, error["type"]), messages[field])
    return errors


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = Field(description="Application version")
    checks: dict[str, dict[str, Any]] = Field(description="Individual component health checks")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2025-09-13T10:30:00Z",
                "version": "1.0.0",
                "checks": {
                    "database": {"status": "healthy", "response_time_ms": 15},
                    "auth": {"status": "healthy", "response_time_ms": 40},
                },
            }
        }
    )
