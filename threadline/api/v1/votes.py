"""
Votes API endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config import VoteAction
from threadline.core.auth import CurrentIdentity
from threadline.core.database import get_db
from threadline.schemas.vote import VoteCreate, VoteResponse, VoteResultResponse
from threadline.services import vote_ledger

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post(
    "/",
    response_model=VoteResultResponse,
    responses={201: {"model": VoteResultResponse}},
)
async def cast_vote(
    vote_data: VoteCreate,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """
    Upvote or downvote a post or comment.

    Voting is a toggle per target:
    - no existing vote: the vote is created (201 Created)
    - same direction again: the vote is removed (200 OK, `removed: true`)
    - opposite direction: the vote is flipped (200 OK)

    Exactly one of `postId`/`commentId` must be set and `voteType` must be
    1 or -1. The response's `votes` is the target's recomputed total.
    """
    result = await vote_ledger.cast_vote(
        db,
        user_id=identity.user_id,
        vote_type=vote_data.vote_type,
        post_id=vote_data.post_id,
        comment_id=vote_data.comment_id,
    )

    response = VoteResultResponse(
        action=result.action,
        removed=result.removed,
        vote=VoteResponse.model_validate(result.vote) if result.vote is not None else None,
        post_id=result.post_id,
        comment_id=result.comment_id,
        votes=result.total,
    )
    status_code = (
        status.HTTP_201_CREATED if result.action == VoteAction.CREATED else status.HTTP_200_OK
    )
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json", by_alias=True),
    )


@router.get("/user/{post_id}", response_model=VoteResponse | None)
async def get_user_vote(
    post_id: Annotated[int, Path(description="Post ID")],
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> VoteResponse | None:
    """
    Get the caller's current vote on a post.

    Returns null when the caller has not voted.
    """
    vote = await vote_ledger.get_user_vote(db, identity.user_id, post_id=post_id)
    if vote is None:
        return None
    return VoteResponse.model_validate(vote)
