"""
Posts API — Posts Route Handlers
=================================

What:  The five REST endpoints over the posts collection.
How:   Extract path/query/body values, delegate to PostService, wrap the
       result in the success envelope. Errors raised by the service are
       turned into error envelopes by the global handlers in main.py.

Endpoints (all under /api):
    GET    /posts        list with page, limit, search
    GET    /posts/{id}   single post
    POST   /posts        create
    PUT    /posts/{id}   update title/body
    DELETE /posts/{id}   idempotent delete

Request bodies for create/update may be JSON or an urlencoded HTML form.
Both are read into the same PostCreate/PostUpdate models.
"""

import json
import logging
from typing import Any, Dict, Optional, Type

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from posts_api.database import get_db_session
from posts_api.exceptions import ValidationError
from posts_api.schemas.post import (
    Envelope,
    MessageData,
    PostCreate,
    PostListData,
    PostResponse,
    PostUpdate,
)
from posts_api.services.post_service import post_service
from posts_api.utils.responses import (
    BODY_NOT_OBJECT,
    INVALID_JSON_BODY,
    POST_DELETED,
    create_success_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

ERROR_RESPONSES = {
    400: {"description": "Invalid input or database error", "model": Envelope[None]},
    500: {"description": "Server error", "model": Envelope[None]},
}
NOT_FOUND_RESPONSE = {404: {"description": "Post not found", "model": Envelope[None]}}

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


# ══════════════════════════════════════════════════════════════════════════
# Request Body
# ══════════════════════════════════════════════════════════════════════════

def is_json_content_type(content_type: str) -> bool:
    return content_type == "application/json" or content_type.endswith("+json")


async def read_body(request: Request) -> Dict[str, Any]:
    """
    Read the request body as a dict, from JSON or an urlencoded form.

    An empty body, or a content type that is neither, gives {} so the
    service reports the missing fields. A body without a content type is
    tried as JSON.

    Raises:
        ValidationError: malformed JSON, or JSON that is not an object (→ 400)
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type == FORM_CONTENT_TYPE:
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw.strip() or (content_type and not is_json_content_type(content_type)):
        return {}

    try:
        data = json.loads(raw)
    except ValueError:
        raise ValidationError(message=INVALID_JSON_BODY)
    if not isinstance(data, dict):
        raise ValidationError(message=BODY_NOT_OBJECT)
    return data


def body_as(model: Type[BaseModel]):
    """Dependency reading the body into `model` (fields the model lacks are dropped)."""

    async def dependency(body: Dict[str, Any] = Depends(read_body)) -> BaseModel:
        return model.model_validate(body)

    return dependency


def body_docs(model: Type[BaseModel]) -> Dict[str, Any]:
    """OpenAPI requestBody for a route that reads its body through body_as()."""
    schema = model.model_json_schema()
    return {
        "requestBody": {
            "content": {
                "application/json": {"schema": schema},
                FORM_CONTENT_TYPE: {"schema": schema},
            }
        }
    }


@router.get(
    "",
    response_model=Envelope[PostListData],
    responses=ERROR_RESPONSES,
    summary="List posts with pagination and search",
)
async def list_posts(
    # Plain strings: bad values fall back to defaults instead of a 422
    page: Optional[str] = Query(default=None, description="Page number (default 1)"),
    limit: Optional[str] = Query(default=None, description="Items per page, 1-100 (default 10)"),
    search: Optional[str] = Query(default=None, description="Case-insensitive match on title or body"),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Newest posts first.

    Example:
        GET /api/posts?page=2&limit=5&search=python
    """
    data = await post_service.list_posts(db, page=page, limit=limit, search=search)
    return create_success_response(data)


@router.get(
    "/{post_id}",
    response_model=Envelope[PostResponse],
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
    summary="Get a single post by ID",
)
async def get_post(post_id: str, db: AsyncSession = Depends(get_db_session)):
    data = await post_service.get_post(db, post_id)
    return create_success_response(data)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=Envelope[PostResponse],
    responses=ERROR_RESPONSES,
    summary="Create a post",
    openapi_extra=body_docs(PostCreate),
)
async def create_post(
    payload: PostCreate = Depends(body_as(PostCreate)),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Create a post from `{title, body, user_id}`.

    Title and body are trimmed before they are stored.
    """
    data = await post_service.create_post(
        db,
        title=payload.title,
        body=payload.body,
        user_id=payload.user_id,
    )
    return create_success_response(data)


@router.put(
    "/{post_id}",
    response_model=Envelope[PostResponse],
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
    summary="Update a post's title and body",
    openapi_extra=body_docs(PostUpdate),
)
async def update_post(
    post_id: str,
    payload: PostUpdate = Depends(body_as(PostUpdate)),
    db: AsyncSession = Depends(get_db_session),
):
    data = await post_service.update_post(db, post_id, title=payload.title, body=payload.body)
    return create_success_response(data)


@router.delete(
    "/{post_id}",
    response_model=Envelope[MessageData],
    responses=ERROR_RESPONSES,
    summary="Delete a post",
)
async def delete_post(post_id: str, db: AsyncSession = Depends(get_db_session)):
    """Returns 200 even when the post did not exist."""
    await post_service.delete_post(db, post_id)
    return create_success_response({}, POST_DELETED)
