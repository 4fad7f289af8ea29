"""
Users API — Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the API contract for the users resource.
Why:   Type coercion for the declared fields, automatic serialization, and
       OpenAPI doc generation.
How:   FastAPI validates request bodies against UserPayload and serializes
       responses through UserResponse.

Design Decision:
    User documents are schema-less in the store. The models declare a small
    set of known fields for type checking only and allow anything else
    through unchanged (extra="allow").
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserPayload(BaseModel):
    """
    Body of POST /users and PATCH /users/{id}.

    Declared fields are type-checked (with coercion, e.g. "30" → 30);
    undeclared fields are stored as sent. Omitted fields are not written,
    so the same model serves full creates and partial updates.
    """

    name: Optional[str] = Field(default=None, description="Display name")
    email: Optional[str] = Field(default=None, description="Contact email address")
    age: Optional[int] = Field(default=None, description="Age in years")

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={"example": {"name": "Alice", "age": 30}},
    )

    @model_validator(mode="before")
    @classmethod
    def reject_identifier(cls, data: Any) -> Any:
        """The store assigns `_id`; a client may never set or change it."""
        if isinstance(data, dict) and "_id" in data:
            raise ValueError("'_id' is assigned by the server and cannot be set")
        return data

    def to_document(self) -> Dict[str, Any]:
        """Fields the client actually sent, ready for insert or $set."""
        document = self.model_dump(exclude_unset=True)
        document.update(self.model_extra or {})
        return document


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """
    A stored user document.

    `_id` comes first, followed by every stored field exactly as persisted.
    """

    id: str = Field(alias="_id", description="Store-assigned identifier (ObjectId hex)")

    # No populate_by_name: a stored field literally called "id" stays an extra.
    model_config = ConfigDict(extra="allow")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> str:
        return str(v)


class ErrorResponse(BaseModel):
    """
    Standardized error body for 400 and 500 responses.

    Example:
        {
            "error": "validation_error",
            "message": "Request body failed validation",
            "details": {"errors": [...]},
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Serialized driver or validation error")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
