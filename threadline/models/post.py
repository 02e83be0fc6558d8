"""
SQLModel-based Post models with inheritance for security

This module defines the Posts database model using SQLModel, which combines
SQLAlchemy and Pydantic functionality. The inheritance structure is:

PostBase (client-writable fields)
    ├─> Posts (database table, adds author and denormalized counters)
    └─> PostCreate/PostUpdate/PostResponse (API schemas, defined in threadline/schemas)

votes and comment_count are denormalized aggregates. They are written only by
threadline.services.counters and never accepted from clients.
"""

from datetime import datetime

from sqlalchemy import ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel

from threadline.utils import utc_now


class PostBase(SQLModel):
    """
    Base model with the fields a client may set on a post.

    content, image_url and link_url are independent; any combination may be set.
    """

    title: str = Field(max_length=300)
    content: str | None = Field(default=None)
    image_url: str | None = Field(default=None, max_length=2048)
    link_url: str | None = Field(default=None, max_length=2048)
    subreddit_id: int | None = Field(default=None)


class Posts(PostBase, table=True):
    """
    Database table for posts.

    author_username is free text recorded from the author's identity at
    creation time, not a foreign key.
    """

    __tablename__ = "posts"

    __table_args__ = (
        ForeignKeyConstraint(
            ["subreddit_id"],
            ["subreddits.id"],
            ondelete="SET NULL",
            onupdate="CASCADE",
            name="fk_posts_subreddit_id",
        ),
        Index("fk_posts_subreddit_id", "subreddit_id"),
        Index("idx_posts_votes", "votes"),
        Index("idx_posts_created_at", "created_at"),
    )

    # Primary key
    id: int | None = Field(default=None, primary_key=True)

    author_username: str = Field(max_length=255)

    # Denormalized counters (may go negative for votes)
    votes: int = Field(default=0)
    comment_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)
