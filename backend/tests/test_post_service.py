"""
Posts API — Post Service Unit Tests
====================================

What:  PostService business logic with a mocked AsyncSession.
Why:   Error translation (validation, not found, database, unexpected) must
       hold regardless of the database behind the session.

What we test:
    ✅ Validation happens before any query
    ✅ Not found raises NotFoundError for get/update, never for delete
    ✅ SQLAlchemy errors become DatabaseError carrying the driver message
    ✅ Unexpected errors become InternalServerError
    ✅ Pagination arithmetic on the list result
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from posts_api.exceptions import (
    DatabaseError,
    InternalServerError,
    NotFoundError,
    ValidationError,
)
from posts_api.models.post import Post
from posts_api.services.post_service import PostService, escape_like


def make_post(id=1, title="Title", body="Body", user_id=7):
    return Post(id=id, title=title, body=body, user_id=user_id)


def scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


class TestEscapeLike:

    def test_plain_term_unchanged(self):
        assert escape_like("hello") == "hello"

    def test_wildcards_escaped(self):
        assert escape_like("50%_off") == "50\\%\\_off"

    def test_backslash_escaped_first(self):
        assert escape_like("a\\b") == "a\\\\b"


class TestPostServiceGet:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_get_post_found(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(make_post(id=3))

        result = await self.service.get_post(mock_db_session, "3")

        assert result == {"id": 3, "title": "Title", "body": "Body", "user_id": 7}

    @pytest.mark.asyncio
    async def test_get_post_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(None)

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_post(mock_db_session, "999999")

        assert exc_info.value.message == "Post not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["abc", "0", "-5", None])
    async def test_get_post_invalid_id_never_queries(self, mock_db_session, bad_id):
        with pytest.raises(ValidationError, match="Invalid post ID"):
            await self.service.get_post(mock_db_session, bad_id)

        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_database_error_passes_driver_message(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError(
            "SELECT ...", {}, Exception("connection refused")
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.get_post(mock_db_session, "1")

        assert exc_info.value.message == "connection refused"
        assert exc_info.value.status_code == 400
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("secret internals")

        with pytest.raises(InternalServerError) as exc_info:
            await self.service.get_post(mock_db_session, "1")

        assert exc_info.value.message == "Internal server error"
        assert "secret internals" not in exc_info.value.message
        assert exc_info.value.context["error_type"] == "RuntimeError"


class TestPostServiceCreate:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_create_post_trims_and_returns_row(self, mock_db_session):
        def assign_id():
            mock_db_session.add.call_args[0][0].id = 42

        mock_db_session.commit.side_effect = assign_id

        result = await self.service.create_post(
            mock_db_session, title="  Hello  ", body="\tWorld\n", user_id=5
        )

        assert result == {"id": 42, "title": "Hello", "body": "World", "user_id": 5}
        mock_db_session.add.assert_called_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_numeric_string_user_id_stored_as_int(self, mock_db_session):
        result = await self.service.create_post(
            mock_db_session, title="T", body="B", user_id="12"
        )
        assert result["user_id"] == 12

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", [None, 0, ""])
    async def test_missing_user_id_rejected_first(self, mock_db_session, user_id):
        # user_id is checked before title/body, so the message is the user_id one
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_post(mock_db_session, title="", body="", user_id=user_id)

        assert exc_info.value.message == "user_id is required"
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", ["abc", "1.5", True, [1]])
    async def test_non_integer_user_id_rejected_before_insert(self, mock_db_session, user_id):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_post(mock_db_session, title="T", body="B", user_id=user_id)

        assert exc_info.value.message == "user_id must be an integer"
        mock_db_session.add.assert_not_called()
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_post_data_joins_messages(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_post(
                mock_db_session, title="   ", body="x" * 10_001, user_id=1
            )

        assert exc_info.value.message == (
            "Title is required and must be a non-empty string, "
            "Body must be 10000 characters or less"
        )

    @pytest.mark.asyncio
    async def test_insert_failure_is_database_error(self, mock_db_session):
        mock_db_session.commit.side_effect = IntegrityError(
            "INSERT ...", {}, Exception('null value in column "user_id"')
        )

        with pytest.raises(DatabaseError, match="null value"):
            await self.service.create_post(mock_db_session, title="T", body="B", user_id=1)


class TestPostServiceUpdate:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_update_changes_title_and_body_only(self, mock_db_session):
        post = make_post(id=4, title="Old", body="Old body", user_id=9)
        mock_db_session.execute.return_value = scalar_result(post)

        result = await self.service.update_post(mock_db_session, "4", title=" New ", body=" New body ")

        assert result == {"id": 4, "title": "New", "body": "New body", "user_id": 9}
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_missing_post_is_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = scalar_result(None)

        with pytest.raises(NotFoundError):
            await self.service.update_post(mock_db_session, "5", title="T", body="B")

        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_validates_before_querying(self, mock_db_session):
        with pytest.raises(ValidationError, match="Body is required"):
            await self.service.update_post(mock_db_session, "5", title="T", body=None)

        mock_db_session.execute.assert_not_awaited()


class TestPostServiceDelete:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_delete_missing_post_is_not_an_error(self, mock_db_session):
        result = MagicMock()
        result.rowcount = 0
        mock_db_session.execute.return_value = result

        await self.service.delete_post(mock_db_session, "123")

        mock_db_session.execute.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_invalid_id(self, mock_db_session):
        with pytest.raises(ValidationError, match="Invalid post ID"):
            await self.service.delete_post(mock_db_session, "zero")


class TestPostServiceList:

    def setup_method(self):
        self.service = PostService()

    def _mock_list(self, session, posts, count):
        rows = MagicMock()
        rows.scalars.return_value.all.return_value = posts
        count_result = MagicMock()
        count_result.scalar.return_value = count
        session.execute = AsyncMock(side_effect=[rows, count_result])

    @pytest.mark.asyncio
    async def test_list_empty(self, mock_db_session):
        self._mock_list(mock_db_session, [], 0)

        result = await self.service.list_posts(mock_db_session)

        assert result["posts"] == []
        assert result["pagination"] == {
            "currentPage": 1,
            "totalPages": 0,
            "totalItems": 0,
            "itemsPerPage": 10,
            "hasNextPage": False,
            "hasPrevPage": False,
        }

    @pytest.mark.asyncio
    async def test_list_middle_page(self, mock_db_session):
        self._mock_list(mock_db_session, [make_post(id=i) for i in (6, 5)], 7)

        result = await self.service.list_posts(mock_db_session, page="2", limit="2")

        assert [p["id"] for p in result["posts"]] == [6, 5]
        pagination = result["pagination"]
        assert pagination["totalPages"] == 4
        assert pagination["hasNextPage"] is True
        assert pagination["hasPrevPage"] is True

    @pytest.mark.asyncio
    async def test_list_database_error(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT ...", {}, Exception('relation "posts" does not exist'))
        )

        with pytest.raises(DatabaseError, match='relation "posts" does not exist'):
            await self.service.list_posts(mock_db_session)
