"""
Posts API — Post SQLAlchemy Model
==================================

What:  ORM mapping of the `posts` table in the hosted database.
Why:   Type-safe queries and inserts instead of hand-built SQL strings.
Who:   Used by PostService for every CRUD operation.

The table is created and migrated by the hosted database, not by this
service. The mapping only mirrors the columns we read and write:

    id       BIGINT/SERIAL primary key, assigned by the database
    title    VARCHAR(255), NOT NULL
    body     TEXT, NOT NULL (application caps it at 10000 chars)
    user_id  INTEGER, NOT NULL, no foreign key enforced here
"""

from typing import Any, Dict

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from posts_api.database import Base


class Post(Base):
    """
    A post row.

    Lifecycle:
        1. Inserted by create (id assigned by the database)
        2. title/body replaced by update; id and user_id never change
        3. Removed by delete (idempotent)
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        """The four public columns, as returned by every endpoint."""
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "user_id": self.user_id,
        }

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, user_id={self.user_id}, title='{self.title[:30]}')>"
