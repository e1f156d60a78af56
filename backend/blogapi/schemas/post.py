"""
Blog API Backend — Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the JSON contract of the posts API.
How:   FastAPI validates request bodies against PostPayload and serializes
       responses through the response models (also used for OpenAPI docs).
Who:   Used by route handlers and PostService.

Wire format of a Post:
    {
        "id": "65f1c0ffee0ddba11ca7b0b5",
        "title": "Hello",
        "content": "World",
        "created_at": "2024-03-13T10:00:00.123000Z",
        "updated_at": "2024-03-13T10:00:00.123000Z"
    }
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blogapi.models.post import PostDocument


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what clients send
# ══════════════════════════════════════════════════════════════════════════


class PostPayload(BaseModel):
    """
    Body of POST /api/posts and PUT /api/posts/{id}.

    Absent fields default to "". Unknown fields (including a client-supplied
    id, created_at or updated_at) are ignored; the server owns those.
    """

    model_config = ConfigDict(extra="ignore")

    title: str = Field(default="", description="Post title")
    content: str = Field(default="", description="Post body")

    @field_validator("title", "content")
    @classmethod
    def validate_utf8(cls, v: str) -> str:
        """JSON may carry lone surrogate escapes ("\\ud800") that no store can encode."""
        try:
            v.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("must be valid UTF-8 text (lone surrogate escapes are not allowed)")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(BaseModel):
    """Full representation of a stored post."""

    id: str = Field(description="24-character hexadecimal post identifier")
    title: str = Field(description="Post title")
    content: str = Field(description="Post body")
    created_at: datetime = Field(description="When the post was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the post was last written (UTC ISO 8601)")

    @classmethod
    def from_post(cls, post: PostDocument) -> "PostResponse":
        return cls(
            id=str(post.id),
            title=post.title,
            content=post.content,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class MessageResponse(BaseModel):
    """Confirmation returned by DELETE /api/posts/{id}."""

    message: str = Field(description="Human-readable confirmation")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Body of every error response.

    Example:
        {"error": "Invalid ID"}
    """

    error: str = Field(description="Error description")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""

    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Document store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
    detail: Optional[str] = Field(default=None, description="Reason when unhealthy")
