"""
Post service.

Creating, editing, listing and hard-deleting posts. Counters on a post
(votes, comment_count) are never written here except through
threadline.services.counters; new posts start at zero.
"""

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config import PostSort
from threadline.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from threadline.core.logging import get_logger
from threadline.core.security import Identity
from threadline.models import Comments, Posts, SavedPosts, Subreddits, Votes
from threadline.services.comment_store import get_post_or_404

logger = get_logger(__name__)

# Fields a post's author may change after creation
EDITABLE_FIELDS = ("title", "content", "image_url", "link_url", "subreddit_id")


async def _ensure_subreddit_exists(db: AsyncSession, subreddit_id: int | None) -> None:
    if subreddit_id is None:
        return
    result = await db.execute(
        select(Subreddits.id).where(Subreddits.id == subreddit_id)  # type: ignore[call-overload]
    )
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Subreddit not found")


def _sort_columns(sort_by: str) -> list[Any]:
    if sort_by == PostSort.NEW:
        return [Posts.created_at.desc(), Posts.id.desc()]  # type: ignore[attr-defined, union-attr]
    if sort_by == PostSort.TOP:
        return [Posts.votes.desc(), Posts.id.desc()]  # type: ignore[attr-defined, union-attr]
    # hot
    return [Posts.votes.desc(), Posts.comment_count.desc(), Posts.id.desc()]  # type: ignore[attr-defined, union-attr]


async def list_posts(
    db: AsyncSession,
    subreddit_id: int | None = None,
    sort_by: str = PostSort.HOT,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[Posts], int]:
    """
    List posts, optionally within one subreddit.

    Sort orders:
    - hot: votes, then comment count
    - new: newest first
    - top: votes

    Returns:
        Tuple of (page of posts, total matching posts)
    """
    query = select(Posts)
    if subreddit_id is not None:
        query = query.where(Posts.subreddit_id == subreddit_id)  # type: ignore[arg-type]

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(*_sort_columns(sort_by)).offset(offset).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def search_posts(
    db: AsyncSession, search_text: str, offset: int = 0, limit: int = 10
) -> tuple[list[Posts], int]:
    """
    Case-insensitive title search ordered by votes.

    The text is matched literally; % and _ are escaped rather than treated as
    LIKE wildcards.
    """
    query = select(Posts).where(
        func.lower(Posts.title).contains(search_text.lower(), autoescape=True)
    )

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Posts.votes.desc(), Posts.id.desc()).offset(offset).limit(limit)  # type: ignore[attr-defined, union-attr]
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def get_posts_by_author(db: AsyncSession, identity: Identity) -> list[Posts]:
    """Posts recorded under any of the identity's aliases, newest first."""
    result = await db.execute(
        select(Posts)
        .where(Posts.author_username.in_(sorted(identity.aliases)))  # type: ignore[attr-defined]
        .order_by(Posts.created_at.desc(), Posts.id.desc())  # type: ignore[attr-defined, union-attr]
    )
    return list(result.scalars().all())


async def create_post(db: AsyncSession, identity: Identity, data: dict[str, Any]) -> Posts:
    """
    Create a post authored by the identity's display name.

    Raises:
        NotFoundError: subreddit_id given but the subreddit does not exist
    """
    await _ensure_subreddit_exists(db, data.get("subreddit_id"))

    post = Posts(
        title=data["title"],
        content=data.get("content") or None,
        image_url=data.get("image_url") or None,
        link_url=data.get("link_url") or None,
        subreddit_id=data.get("subreddit_id"),
        author_username=identity.display_name,
        votes=0,
        comment_count=0,
    )
    db.add(post)
    await db.commit()
    await db.refresh(post)

    logger.info("post_created", post_id=post.id, subreddit_id=post.subreddit_id)
    return post


async def update_post(
    db: AsyncSession, post_id: int, identity: Identity, updates: dict[str, Any]
) -> Posts:
    """
    Apply author edits to a post.

    Only EDITABLE_FIELDS are applied; anything else in updates is ignored.

    Raises:
        NotFoundError: post or new subreddit does not exist
        AuthorizationError: identity is not the author
    """
    post = await get_post_or_404(db, post_id)
    if not identity.owns(post.author_username):
        raise AuthorizationError("Not authorized to edit this post")

    changes = {key: value for key, value in updates.items() if key in EDITABLE_FIELDS}
    if "title" in changes and not changes["title"]:
        raise ValidationError("Post title is required")
    if "subreddit_id" in changes:
        await _ensure_subreddit_exists(db, changes["subreddit_id"])

    for key, value in changes.items():
        setattr(post, key, value)

    await db.commit()
    await db.refresh(post)

    logger.info("post_updated", post_id=post.id, fields=sorted(changes))
    return post


async def delete_post(db: AsyncSession, post_id: int, identity: Identity) -> None:
    """
    Hard-delete a post with its comments, votes and saved-post rows.

    Dependents are removed explicitly so the result does not depend on the
    database enforcing ON DELETE CASCADE.

    Raises:
        NotFoundError: post does not exist
        AuthorizationError: identity is not the author
    """
    post = await get_post_or_404(db, post_id)
    if not identity.owns(post.author_username):
        raise AuthorizationError("Not authorized to delete this post")

    comment_ids = select(Comments.id).where(Comments.post_id == post_id)  # type: ignore[call-overload]

    await db.execute(delete(Votes).where(Votes.comment_id.in_(comment_ids)))  # type: ignore[union-attr]
    await db.execute(delete(Votes).where(Votes.post_id == post_id))  # type: ignore[arg-type]
    await db.execute(delete(SavedPosts).where(SavedPosts.post_id == post_id))  # type: ignore[arg-type]
    # parent_id is ON DELETE SET NULL, so one statement removes the whole thread
    await db.execute(delete(Comments).where(Comments.post_id == post_id))  # type: ignore[arg-type]
    await db.delete(post)
    await db.commit()

    logger.info("post_deleted", post_id=post_id)
