"""
Posts API — Post Service (Business Logic)
==========================================

What:  The five post operations: list, get, create, update, delete.
Why:   Keeps validation, querying and result shaping out of the route layer
       so it can be tested with a mocked session.
How:   Each method validates its input, talks to the database through the
       AsyncSession it is handed, and returns plain dicts ready to be
       wrapped in the response envelope.

Error Handling Strategy:
    Every method runs inside `_boundary()`:
    - PostsAPIError subclasses (validation, not found) propagate unchanged
    - SQLAlchemyError → DatabaseError (400, driver message passed through)
    - anything else   → logged with traceback, InternalServerError (500)

Design Decision:
    PostService is stateless; it receives the session for each call.
    Writes are committed here, one commit per mutating call, so the client
    only sees success once the database has accepted the change.
"""

import logging
import math
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy import delete, desc, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from posts_api.exceptions import (
    DatabaseError,
    InternalServerError,
    NotFoundError,
    PostsAPIError,
    ValidationError,
)
from posts_api.models.post import Post
from posts_api.utils.responses import (
    INVALID_POST_ID,
    USER_ID_NOT_INTEGER,
    USER_ID_REQUIRED,
)
from posts_api.utils.validation import (
    parse_int,
    sanitize_string,
    validate_id,
    validate_pagination,
    validate_post_data,
)

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so a search for '50%' matches the literal text."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def driver_message(exc: SQLAlchemyError) -> str:
    """The database's own error text, without SQLAlchemy's statement dump."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class PostService:
    """
    Business logic layer for post operations.

    Responsibilities:
        - list_posts():  paginated, searchable listing (newest first)
        - get_post():    single post, 404 when missing
        - create_post(): validated insert, returns the new row
        - update_post(): validated title/body replacement, 404 when missing
        - delete_post(): idempotent removal
    """

    @asynccontextmanager
    async def _boundary(self, db: AsyncSession, operation: str, **context: Any) -> AsyncIterator[None]:
        try:
            yield
        except PostsAPIError:
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            message = driver_message(e)
            logger.warning("Database error while %s: %s", operation, message)
            raise DatabaseError(message=message, context={"operation": operation, **context})
        except Exception as e:
            logger.error("Unexpected error while %s: %s", operation, str(e), exc_info=True)
            raise InternalServerError(
                context={"operation": operation, "error_type": type(e).__name__, **context}
            )

    @staticmethod
    def _require_valid_id(post_id: Any) -> int:
        if not validate_id(post_id):
            raise ValidationError(message=INVALID_POST_ID, field="id")
        return parse_int(post_id)

    @staticmethod
    def _require_valid_post_data(title: Any, body: Any) -> None:
        is_valid, errors = validate_post_data(title, body)
        if not is_valid:
            raise ValidationError(message=", ".join(errors), context={"errors": errors})

    async def list_posts(
        self,
        db: AsyncSession,
        page: Any = None,
        limit: Any = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        One page of posts plus pagination metadata.

        Query plan:
            SELECT ... FROM posts [WHERE title ILIKE :p OR body ILIKE :p]
            ORDER BY id DESC LIMIT :limit OFFSET :offset
            SELECT count(id) FROM posts [same WHERE]

        Args:
            page, limit: raw query values; clamped by validate_pagination
            search:      optional term; trimmed, blank means no filter

        Returns:
            {"posts": [...], "pagination": {...}}
        """
        page_num, limit_num = validate_pagination(page, limit)
        offset = (page_num - 1) * limit_num
        term = sanitize_string(search)

        async with self._boundary(db, "listing posts", page=page_num, limit=limit_num, search=term):
            query = select(Post)
            count_query = select(func.count(Post.id))

            if term:
                pattern = f"%{escape_like(term)}%"
                matches = or_(
                    Post.title.ilike(pattern, escape=LIKE_ESCAPE),
                    Post.body.ilike(pattern, escape=LIKE_ESCAPE),
                )
                query = query.where(matches)
                count_query = count_query.where(matches)

            query = query.order_by(desc(Post.id)).offset(offset).limit(limit_num)

            result = await db.execute(query)
            posts = list(result.scalars().all())

            count_result = await db.execute(count_query)
            total_items = count_result.scalar() or 0

            total_pages = math.ceil(total_items / limit_num)

            return {
                "posts": [post.to_dict() for post in posts],
                "pagination": {
                    "currentPage": page_num,
                    "totalPages": total_pages,
                    "totalItems": total_items,
                    "itemsPerPage": limit_num,
                    "hasNextPage": page_num < total_pages,
                    "hasPrevPage": page_num > 1,
                },
            }

    async def get_post(self, db: AsyncSession, post_id: Any) -> Dict[str, Any]:
        """
        Fetch exactly one post.

        Raises:
            ValidationError: id is not a positive integer (→ 400)
            NotFoundError:   no row with that id (→ 404)
            DatabaseError:   query failed (→ 400)
        """
        pid = self._require_valid_id(post_id)

        async with self._boundary(db, "fetching post", post_id=pid):
            result = await db.execute(select(Post).where(Post.id == pid))
            post = result.scalar_one_or_none()
            if post is None:
                raise NotFoundError(resource_id=pid)
            return post.to_dict()

    async def create_post(
        self,
        db: AsyncSession,
        title: Any,
        body: Any,
        user_id: Any,
    ) -> Dict[str, Any]:
        """
        Insert a post and return the stored row, id included.

        user_id is checked first, then title/body. Title and body are
        trimmed before insert. user_id must be integer-like; numeric strings
        (as sent by HTML forms) are stored as ints.
        """
        if not user_id:
            raise ValidationError(message=USER_ID_REQUIRED, field="user_id")
        parsed_user_id = parse_int(user_id)
        if parsed_user_id is None:
            raise ValidationError(message=USER_ID_NOT_INTEGER, field="user_id")
        self._require_valid_post_data(title, body)

        async with self._boundary(db, "creating post", user_id=parsed_user_id):
            post = Post(
                title=sanitize_string(title),
                body=sanitize_string(body),
                user_id=parsed_user_id,
            )
            db.add(post)
            await db.commit()
            logger.info("Post %s created by user %s", post.id, post.user_id)
            return post.to_dict()

    async def update_post(
        self,
        db: AsyncSession,
        post_id: Any,
        title: Any,
        body: Any,
    ) -> Dict[str, Any]:
        """
        Replace title and body of an existing post.

        id and user_id are never changed.

        Raises:
            ValidationError: bad id or bad title/body (→ 400)
            NotFoundError:   no row with that id (→ 404)
            DatabaseError:   update failed (→ 400)
        """
        pid = self._require_valid_id(post_id)
        self._require_valid_post_data(title, body)

        async with self._boundary(db, "updating post", post_id=pid):
            result = await db.execute(select(Post).where(Post.id == pid))
            post = result.scalar_one_or_none()
            if post is None:
                raise NotFoundError(resource_id=pid)

            post.title = sanitize_string(title)
            post.body = sanitize_string(body)
            await db.commit()
            logger.info("Post %s updated", pid)
            return post.to_dict()

    async def delete_post(self, db: AsyncSession, post_id: Any) -> None:
        """
        Delete by id. Succeeds whether or not the row existed.

        Raises:
            ValidationError: id is not a positive integer (→ 400)
            DatabaseError:   delete failed (→ 400)
        """
        pid = self._require_valid_id(post_id)

        async with self._boundary(db, "deleting post", post_id=pid):
            result = await db.execute(delete(Post).where(Post.id == pid))
            await db.commit()
            logger.info("Delete post %s: %d row(s) removed", pid, result.rowcount or 0)


# Stateless; shared by all requests
post_service = PostService()
