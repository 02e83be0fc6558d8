"""
SQLModel-based Subreddit models

SubredditBase (shared public fields)
    ├─> Subreddits (database table)
    └─> SubredditCreate/SubredditResponse (API schemas, defined in threadline/schemas)

Subreddits are created rarely and are immutable after creation.
"""

from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from threadline.utils import utc_now


class SubredditBase(SQLModel):
    """Base model with shared public fields for Subreddits."""

    name: str = Field(max_length=100)
    description: str | None = Field(default=None)


class Subreddits(SubredditBase, table=True):
    """Database table for communities."""

    __tablename__ = "subreddits"

    __table_args__ = (UniqueConstraint("name", name="uq_subreddits_name"),)

    # Primary key
    id: int | None = Field(default=None, primary_key=True)

    member_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)
