"""
Posts API — Pydantic Request/Response Schemas
==============================================

What:  Pydantic models describing the API contract.
Why:   Response serialization and OpenAPI documentation.

Request bodies are deliberately loose (`Any` fields): type and length rules
are enforced by `utils.validation` so that every violation is reported
together in one 400 envelope, rather than as FastAPI's default 422.
The same models receive JSON and urlencoded form bodies (routes.posts.read_body).
"""

from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


# ══════════════════════════════════════════════════════════════════════════
# Envelope
# ══════════════════════════════════════════════════════════════════════════


class Envelope(BaseModel, Generic[T]):
    """The `{success, data, error}` wrapper shared by every endpoint."""
    success: bool = Field(description="Whether the request succeeded")
    data: Optional[T] = Field(default=None, description="Payload on success, null on failure")
    error: Optional[str] = Field(default=None, description="Error message on failure, null on success")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(BaseModel):
    """Body of POST /api/posts."""
    title: Any = Field(default=None, description="Post title (1-255 chars after trimming)")
    body: Any = Field(default=None, description="Post content (1-10000 chars after trimming)")
    user_id: Any = Field(default=None, description="Author's user id (required)")


class PostUpdate(BaseModel):
    """
    Body of PUT /api/posts/{id}.

    Only title and body; a user_id in the payload is ignored.
    """
    title: Any = Field(default=None, description="New title")
    body: Any = Field(default=None, description="New content")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(BaseModel):
    id: int = Field(description="Database-assigned identifier")
    title: str
    body: str
    user_id: int

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    """
    Page metadata for GET /api/posts.

    Field names are camelCase to match what the existing frontend reads.
    """
    currentPage: int
    totalPages: int
    totalItems: int
    itemsPerPage: int
    hasNextPage: bool
    hasPrevPage: bool


class PostListData(BaseModel):
    posts: List[PostResponse]
    pagination: Pagination


class MessageData(BaseModel):
    message: str


class HealthData(BaseModel):
    """Liveness payload. Never depends on the database."""
    status: str = Field(description="Always 'OK' while the process is serving")
    timestamp: datetime = Field(description="Current server time (UTC)")
    uptime: float = Field(description="Seconds since the process started")


class ServerInfo(BaseModel):
    message: str
    version: str
    timestamp: datetime
