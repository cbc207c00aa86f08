"""
ExportDesk Backend: Shared API Schemas
======================================

What:  Response models used by every resource (errors, confirmations,
       health) and the single validation entry point for form payloads.
How:   JSON bodies are validated by FastAPI against the request models; the
       multipart endpoints collect their form fields into a dict and call
       `validate_payload()`. Both paths end up as the same 400 error body.
"""

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def describe_error(error: Dict[str, Any]) -> str:
    """Render one pydantic error entry as `field: message`."""
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
    field = ".".join(loc)
    msg = error.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


def validate_payload(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """
    Validate a payload against a request model.

    Raises:
        ValidationError with every failed field listed in the message.
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = e.errors()
        first_field = ".".join(str(part) for part in errors[0]["loc"]) if errors else None
        raise ValidationError(
            message="; ".join(describe_error(err) for err in errors),
            field=first_field or None,
            context={"fields": [describe_error(err) for err in errors]},
        ) from e


class MessageResponse(BaseModel):
    """Confirmation body returned by delete endpoints."""
    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "product with ID '42' was not found",
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and datastore status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    storage: str = Field(description="Image storage: writable, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
