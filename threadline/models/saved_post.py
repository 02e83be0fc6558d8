"""
SQLModel-based SavedPost model

SavedPosts is a junction table with composite primary key (user_id, post_id).
Presence of a row means the post is saved; no "unsaved" state is stored.
"""

from datetime import datetime

from sqlalchemy import ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel

from threadline.utils import utc_now


class SavedPosts(SQLModel, table=True):
    """Database table for per-user bookmarks."""

    __tablename__ = "saved_posts"

    __table_args__ = (
        ForeignKeyConstraint(
            ["post_id"],
            ["posts.id"],
            ondelete="CASCADE",
            onupdate="CASCADE",
            name="fk_saved_posts_post_id",
        ),
        Index("idx_saved_posts_user_created_at", "user_id", "created_at"),
    )

    # Composite primary key
    user_id: str = Field(primary_key=True, max_length=255)
    post_id: int = Field(primary_key=True)

    created_at: datetime = Field(default_factory=utc_now)
