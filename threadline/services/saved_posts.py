"""
Saved-post registry.

A saved post is a (user_id, post_id) row; its presence is the saved state.
Toggling deletes an existing row or inserts a new one. An insert that loses
a race against a concurrent identical insert is treated as already saved.
"""

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.core.logging import get_logger
from threadline.models import Posts, SavedPosts
from threadline.services.comment_store import get_post_or_404

logger = get_logger(__name__)


async def is_saved(db: AsyncSession, user_id: str | None, post_id: int) -> bool:
    """
    Whether the user has saved the post.

    Anonymous callers (user_id None) always get False.
    """
    if not user_id:
        return False

    result = await db.execute(
        select(SavedPosts.post_id).where(  # type: ignore[call-overload]
            SavedPosts.user_id == user_id,
            SavedPosts.post_id == post_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def toggle_save(db: AsyncSession, user_id: str, post_id: int) -> bool:
    """
    Save the post if it is not saved, otherwise unsave it.

    Args:
        db: Database session
        user_id: Identity provider user id
        post_id: Post to toggle

    Returns:
        True if the post is now saved, False if it was unsaved

    Raises:
        NotFoundError: post does not exist
    """
    await get_post_or_404(db, post_id)

    if await is_saved(db, user_id, post_id):
        await db.execute(
            delete(SavedPosts).where(
                SavedPosts.user_id == user_id,  # type: ignore[arg-type]
                SavedPosts.post_id == post_id,  # type: ignore[arg-type]
            )
        )
        await db.commit()
        logger.info("post_unsaved", user_id=user_id, post_id=post_id)
        return False

    db.add(SavedPosts(user_id=user_id, post_id=post_id))
    try:
        await db.commit()
    except IntegrityError:
        # A concurrent request saved it first; the end state is the same
        await db.rollback()
        logger.info("post_save_race_ignored", user_id=user_id, post_id=post_id)
        return True

    logger.info("post_saved", user_id=user_id, post_id=post_id)
    return True


async def unsave(db: AsyncSession, user_id: str, post_id: int) -> bool:
    """
    Remove a saved post.

    Returns:
        True if a saved row was removed, False if the post was not saved
    """
    result = await db.execute(
        delete(SavedPosts).where(
            SavedPosts.user_id == user_id,  # type: ignore[arg-type]
            SavedPosts.post_id == post_id,  # type: ignore[arg-type]
        )
    )
    await db.commit()

    removed = (result.rowcount or 0) > 0
    if removed:
        logger.info("post_unsaved", user_id=user_id, post_id=post_id)
    return removed


async def list_saved(db: AsyncSession, user_id: str) -> list[Posts]:
    """Posts saved by the user, most recently saved first."""
    result = await db.execute(
        select(Posts)
        .join(SavedPosts, SavedPosts.post_id == Posts.id)  # type: ignore[arg-type]
        .where(SavedPosts.user_id == user_id)  # type: ignore[arg-type]
        .order_by(SavedPosts.created_at.desc())  # type: ignore[attr-defined]
    )
    return list(result.scalars().all())
