"""
SQLModel-based Vote models

VoteBase (shared public fields)
    ├─> Votes (database table)
    └─> VoteCreate/VoteResponse (API schemas, defined in threadline/schemas)

A vote targets exactly one of a post or a comment. Each user holds at most
one vote per target.

Constraints:
- Unique on (user_id, post_id) and on (user_id, comment_id). NULLs are
  distinct in both indexes, so comment votes never collide on post_id and
  vice versa.
- Check that exactly one target column is set.
- Check that vote_type is +1 or -1.
"""

from sqlalchemy import CheckConstraint, ForeignKeyConstraint, Index, UniqueConstraint
from sqlmodel import Field, SQLModel


class VoteBase(SQLModel):
    """Base model with shared public fields for Votes."""

    post_id: int | None = Field(default=None)
    comment_id: int | None = Field(default=None)

    # 1 = upvote, -1 = downvote
    vote_type: int


class Votes(VoteBase, table=True):
    """Database table for votes on posts and comments."""

    __tablename__ = "votes"

    __table_args__ = (
        ForeignKeyConstraint(
            ["post_id"],
            ["posts.id"],
            ondelete="CASCADE",
            onupdate="CASCADE",
            name="fk_votes_post_id",
        ),
        ForeignKeyConstraint(
            ["comment_id"],
            ["comments.id"],
            ondelete="CASCADE",
            onupdate="CASCADE",
            name="fk_votes_comment_id",
        ),
        UniqueConstraint("user_id", "post_id", name="uq_votes_user_post"),
        UniqueConstraint("user_id", "comment_id", name="uq_votes_user_comment"),
        CheckConstraint(
            "(post_id IS NULL) <> (comment_id IS NULL)", name="ck_votes_single_target"
        ),
        CheckConstraint("vote_type IN (1, -1)", name="ck_votes_vote_type"),
        Index("fk_votes_post_id", "post_id"),
        Index("fk_votes_comment_id", "comment_id"),
    )

    # Primary key
    id: int | None = Field(default=None, primary_key=True)

    # Identity provider's stable user id
    user_id: str = Field(max_length=255)
