"""
Vote ledger service.

Records one vote per (user, target) where a target is a post or a comment,
and keeps the target's denormalized vote total equal to the sum of its votes.

Casting a vote:
- no existing vote        -> insert
- existing, same type     -> delete (toggle off)
- existing, opposite type -> update in place

The target row is locked first, so writers to one target are serialized, and
the write and the total recomputation are committed together. A unique
constraint on (user_id, post_id) / (user_id, comment_id) rejects a racing
duplicate insert; the decision is then retried once against fresh state.
"""

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config import VoteAction, VoteType
from threadline.core.exceptions import ConflictError, NotFoundError, ValidationError
from threadline.core.logging import get_logger
from threadline.models import Votes
from threadline.services.counters import (
    lock_comment,
    lock_post,
    recompute_comment_votes,
    recompute_post_votes,
)

logger = get_logger(__name__)

# One retry after a uniqueness violation, then the conflict is surfaced
MAX_ATTEMPTS = 2


@dataclass
class VoteResult:
    """Outcome of cast_vote: the resulting vote (None when removed) and the target's new total."""

    action: str
    vote: Votes | None
    post_id: int | None
    comment_id: int | None
    total: int

    @property
    def removed(self) -> bool:
        return self.action == VoteAction.REMOVED


def validate_vote_target(post_id: int | None, comment_id: int | None, vote_type: int) -> None:
    """
    Reject malformed votes before anything is written.

    Raises:
        ValidationError: both or neither target set, or vote_type not +1/-1
    """
    if (post_id is None) == (comment_id is None):
        raise ValidationError("Exactly one of postId or commentId must be set")
    if vote_type not in VoteType.ALL:
        raise ValidationError("voteType must be 1 or -1")


async def get_user_vote(
    db: AsyncSession,
    user_id: str,
    post_id: int | None = None,
    comment_id: int | None = None,
) -> Votes | None:
    """Fetch the user's active vote on a post or comment, if any."""
    if (post_id is None) == (comment_id is None):
        raise ValidationError("Exactly one of postId or commentId must be set")

    query = select(Votes).where(Votes.user_id == user_id)  # type: ignore[arg-type]
    if post_id is not None:
        query = query.where(Votes.post_id == post_id)  # type: ignore[arg-type]
    else:
        query = query.where(Votes.comment_id == comment_id)  # type: ignore[arg-type]

    result = await db.execute(query)
    return result.scalar_one_or_none()


async def _lock_target(db: AsyncSession, post_id: int | None, comment_id: int | None) -> None:
    """Lock the voted-on row; first statement of every attempt's transaction."""
    if post_id is not None:
        if not await lock_post(db, post_id):
            raise NotFoundError("Post not found")
    elif comment_id is not None:
        if not await lock_comment(db, comment_id):
            raise NotFoundError("Comment not found")
    else:
        raise ValidationError("Exactly one of postId or commentId must be set")


async def _recompute_target(db: AsyncSession, post_id: int | None, comment_id: int | None) -> int:
    if post_id is not None:
        return await recompute_post_votes(db, post_id)
    if comment_id is not None:
        return await recompute_comment_votes(db, comment_id)
    raise ValidationError("Exactly one of postId or commentId must be set")


async def _apply_vote(
    db: AsyncSession,
    user_id: str,
    vote_type: int,
    post_id: int | None,
    comment_id: int | None,
) -> VoteResult:
    """Single lock-read-decide-write pass; flushes so the recount sees the change."""
    await _lock_target(db, post_id, comment_id)
    existing = await get_user_vote(db, user_id, post_id=post_id, comment_id=comment_id)

    vote: Votes | None
    if existing is None:
        vote = Votes(user_id=user_id, post_id=post_id, comment_id=comment_id, vote_type=vote_type)
        db.add(vote)
        action = VoteAction.CREATED
    elif existing.vote_type == vote_type:
        await db.delete(existing)
        vote = None
        action = VoteAction.REMOVED
    else:
        existing.vote_type = vote_type
        vote = existing
        action = VoteAction.UPDATED

    await db.flush()
    total = await _recompute_target(db, post_id, comment_id)

    return VoteResult(
        action=action, vote=vote, post_id=post_id, comment_id=comment_id, total=total
    )


async def cast_vote(
    db: AsyncSession,
    user_id: str,
    vote_type: int,
    post_id: int | None = None,
    comment_id: int | None = None,
) -> VoteResult:
    """
    Cast, switch, or toggle off a user's vote on a post or comment.

    Args:
        db: Database session
        user_id: Voter's identity provider user id
        vote_type: 1 (up) or -1 (down)
        post_id: Target post (exclusive with comment_id)
        comment_id: Target comment (exclusive with post_id)

    Returns:
        VoteResult with the stored vote (None if toggled off) and the
        target's recomputed total

    Raises:
        ValidationError: malformed target or vote type
        NotFoundError: target does not exist
        ConflictError: uniqueness violation persisted after one retry
    """
    validate_vote_target(post_id, comment_id, vote_type)

    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            result = await _apply_vote(db, user_id, vote_type, post_id, comment_id)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning(
                "vote_uniqueness_conflict",
                user_id=user_id,
                post_id=post_id,
                comment_id=comment_id,
                attempt=attempt,
            )
            continue

        if result.vote is not None:
            await db.refresh(result.vote)

        logger.info(
            "vote_cast",
            user_id=user_id,
            post_id=post_id,
            comment_id=comment_id,
            vote_type=vote_type,
            action=result.action,
            total=result.total,
        )
        return result

    raise ConflictError("Vote could not be recorded due to a concurrent update, please retry")
