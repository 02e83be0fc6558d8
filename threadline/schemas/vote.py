"""
Pydantic schemas for Vote endpoints
"""

from pydantic import Field

from threadline.schemas.base import CamelModel


class VoteCreate(CamelModel):
    """
    Schema for casting a vote.

    Exactly one of postId/commentId must be set and voteType must be 1 or -1;
    both rules are enforced by the vote ledger so they surface as 400s.
    """

    post_id: int | None = Field(default=None, description="Post to vote on")
    comment_id: int | None = Field(default=None, description="Comment to vote on")
    vote_type: int = Field(description="1 for upvote, -1 for downvote")


class VoteResponse(CamelModel):
    """A single active vote"""

    id: int
    user_id: str
    post_id: int | None = None
    comment_id: int | None = None
    vote_type: int


class VoteResultResponse(CamelModel):
    """
    Outcome of casting a vote.

    votes is the target's authoritative total after the change. When the
    vote was toggled off, removed is true and vote is null.
    """

    action: str
    removed: bool
    vote: VoteResponse | None = None
    post_id: int | None = None
    comment_id: int | None = None
    votes: int
