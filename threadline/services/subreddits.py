"""Subreddit service."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.core.exceptions import ConflictError, NotFoundError
from threadline.core.logging import get_logger
from threadline.models import Subreddits

logger = get_logger(__name__)


async def list_subreddits(db: AsyncSession) -> list[Subreddits]:
    """All subreddits, largest communities first."""
    result = await db.execute(
        select(Subreddits).order_by(Subreddits.member_count.desc(), Subreddits.id.asc())  # type: ignore[attr-defined, union-attr]
    )
    return list(result.scalars().all())


async def get_subreddit(db: AsyncSession, subreddit_id: int) -> Subreddits:
    """Load a subreddit or raise NotFoundError."""
    result = await db.execute(
        select(Subreddits).where(Subreddits.id == subreddit_id)  # type: ignore[arg-type]
    )
    subreddit = result.scalar_one_or_none()
    if subreddit is None:
        raise NotFoundError("Subreddit not found")
    return subreddit


async def create_subreddit(db: AsyncSession, name: str, description: str | None) -> Subreddits:
    """
    Create a subreddit with a unique name.

    Raises:
        ConflictError: a subreddit with this name already exists
    """
    existing = await db.execute(
        select(Subreddits.id).where(Subreddits.name == name)  # type: ignore[call-overload]
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("Subreddit name already taken")

    subreddit = Subreddits(name=name, description=description or None)
    db.add(subreddit)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Subreddit name already taken") from None

    await db.refresh(subreddit)
    logger.info("subreddit_created", subreddit_id=subreddit.id, name=subreddit.name)
    return subreddit
