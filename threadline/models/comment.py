"""
SQLModel-based Comment models with inheritance for security

CommentBase (shared public fields)
    ├─> Comments (database table, adds author, depth, counters and timestamps)
    └─> CommentCreate/CommentUpdate/CommentResponse (API schemas, defined in threadline/schemas)

Comments form a tree through parent_id. depth is cached at creation time as
parent.depth + 1 (0 for top-level comments) and is never recomputed.

Deletion is soft: content is replaced by DELETED_COMMENT_TEXT and deleted_at is
stamped, so the row and its replies keep the thread shape.
"""

from datetime import datetime

from sqlalchemy import ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel

from threadline.utils import utc_now


class CommentBase(SQLModel):
    """Base model with shared public fields for Comments."""

    content: str
    post_id: int

    # Threading: null for top-level, id of parent comment for replies
    parent_id: int | None = Field(default=None)


class Comments(CommentBase, table=True):
    """Database table for comments."""

    __tablename__ = "comments"

    __table_args__ = (
        ForeignKeyConstraint(
            ["post_id"],
            ["posts.id"],
            ondelete="CASCADE",
            onupdate="CASCADE",
            name="fk_comments_post_id",
        ),
        ForeignKeyConstraint(
            ["parent_id"],
            ["comments.id"],
            ondelete="SET NULL",
            onupdate="CASCADE",
            name="fk_comments_parent_id",
        ),
        Index("fk_comments_post_id", "post_id"),
        Index("fk_comments_parent_id", "parent_id"),
        Index("idx_comments_author_username", "author_username"),
    )

    # Primary key
    id: int | None = Field(default=None, primary_key=True)

    author_username: str = Field(max_length=255)

    # Cached at creation: parent.depth + 1, or 0 for top-level
    depth: int = Field(default=0)

    # Denormalized vote total
    votes: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime | None = Field(default=None)
    deleted_at: datetime | None = Field(default=None)
