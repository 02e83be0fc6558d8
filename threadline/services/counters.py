"""
Denormalized counter maintenance.

This module is the only writer of Posts.votes, Posts.comment_count and
Comments.votes. Every counter is recomputed by full aggregation over the
underlying rows rather than incremented, so a stored value can never drift
from the rows it summarizes. Callers run these inside the same transaction
as the write that changed the rows and commit afterwards.

Writers lock the counter's row first (lock_post / lock_comment) so that
concurrent writers to the same target are serialized. The aggregates are
locking reads as well: under REPEATABLE READ a plain read returns the
transaction snapshot, which can miss rows committed by the writer that held
the lock before us.
"""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.models import Comments, Posts, Votes


async def lock_post(db: AsyncSession, post_id: int) -> bool:
    """
    Take a row lock on a post for the rest of the transaction.

    Returns:
        False if the post does not exist
    """
    result = await db.execute(
        select(Posts.id).where(Posts.id == post_id).with_for_update()  # type: ignore[call-overload]
    )
    return result.scalar_one_or_none() is not None


async def lock_comment(db: AsyncSession, comment_id: int) -> bool:
    """
    Take a row lock on a comment for the rest of the transaction.

    Returns:
        False if the comment does not exist
    """
    result = await db.execute(
        select(Comments.id).where(Comments.id == comment_id).with_for_update()  # type: ignore[call-overload]
    )
    return result.scalar_one_or_none() is not None


async def recompute_post_votes(db: AsyncSession, post_id: int) -> int:
    """
    Recalculate and store a post's vote total.

    Args:
        db: Database session
        post_id: Post whose total to recompute

    Returns:
        The new total (sum of vote_type over the post's votes)
    """
    total_result = await db.execute(
        select(func.coalesce(func.sum(Votes.vote_type), 0))
        .where(Votes.post_id == post_id)  # type: ignore[arg-type]
        .with_for_update()
    )
    total = int(total_result.scalar() or 0)

    await db.execute(
        update(Posts).where(Posts.id == post_id).values(votes=total)  # type: ignore[arg-type]
    )
    return total


async def recompute_comment_votes(db: AsyncSession, comment_id: int) -> int:
    """
    Recalculate and store a comment's vote total.

    Returns:
        The new total (sum of vote_type over the comment's votes)
    """
    total_result = await db.execute(
        select(func.coalesce(func.sum(Votes.vote_type), 0))
        .where(Votes.comment_id == comment_id)  # type: ignore[arg-type]
        .with_for_update()
    )
    total = int(total_result.scalar() or 0)

    await db.execute(
        update(Comments).where(Comments.id == comment_id).values(votes=total)  # type: ignore[arg-type]
    )
    return total


async def recompute_post_comment_count(db: AsyncSession, post_id: int) -> int:
    """
    Recalculate and store a post's comment count.

    Soft-deleted comments keep their row and are counted, so the count
    matches the number of comments (placeholders included) a client renders.

    Returns:
        The new count
    """
    count_result = await db.execute(
        select(func.count(Comments.id))
        .where(Comments.post_id == post_id)  # type: ignore[arg-type]
        .with_for_update()
    )
    count = int(count_result.scalar() or 0)

    await db.execute(
        update(Posts).where(Posts.id == post_id).values(comment_count=count)  # type: ignore[arg-type]
    )
    return count
