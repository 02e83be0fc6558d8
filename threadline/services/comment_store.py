"""
Comment store service.

Creates, edits and soft-deletes comments while keeping the owning post's
comment_count equal to the number of comment rows for that post.

Soft delete overwrites content with DELETED_COMMENT_TEXT and stamps
deleted_at. The row survives, replies stay attached to it, and the post's
comment count is unchanged.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.config import DELETED_COMMENT_TEXT
from threadline.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from threadline.core.logging import get_logger
from threadline.core.security import Identity
from threadline.models import Comments, Posts
from threadline.services.counters import lock_post, recompute_post_comment_count
from threadline.utils import utc_now

logger = get_logger(__name__)


async def get_post_or_404(db: AsyncSession, post_id: int) -> Posts:
    """Load a post or raise NotFoundError."""
    result = await db.execute(select(Posts).where(Posts.id == post_id))  # type: ignore[arg-type]
    post = result.scalar_one_or_none()
    if post is None:
        raise NotFoundError("Post not found")
    return post


async def get_comment(db: AsyncSession, comment_id: int) -> Comments:
    """Load a comment or raise NotFoundError."""
    result = await db.execute(select(Comments).where(Comments.id == comment_id))  # type: ignore[arg-type]
    comment = result.scalar_one_or_none()
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


async def get_post_comment_count(db: AsyncSession, post_id: int) -> int:
    """Read the stored comment count for a post."""
    result = await db.execute(select(Posts.comment_count).where(Posts.id == post_id))  # type: ignore[call-overload]
    return int(result.scalar() or 0)


def _check_ownership(comment: Comments, identity: Identity, action: str) -> None:
    if not identity.owns(comment.author_username):
        logger.info(
            "comment_ownership_denied",
            comment_id=comment.id,
            action=action,
        )
        raise AuthorizationError(f"Not authorized to {action} this comment")


async def create_comment(
    db: AsyncSession,
    post_id: int,
    author_username: str,
    content: str,
    parent_id: int | None = None,
) -> tuple[Comments, int]:
    """
    Create a comment or reply and recount the post's comments.

    Depth is fixed here from the parent's stored depth and never recomputed.

    Args:
        db: Database session
        post_id: Post being commented on
        author_username: Author's display name at creation time
        content: Comment text
        parent_id: Comment being replied to, None for a top-level comment

    Returns:
        Tuple of (created comment, post's new comment count)

    Raises:
        ValidationError: blank content, or parent belongs to another post
        NotFoundError: post or parent comment does not exist
    """
    if not content or not content.strip():
        raise ValidationError("Comment content is required")

    # Serializes comment writers on this post so the recount sees every row
    if not await lock_post(db, post_id):
        raise NotFoundError("Post not found")

    depth = 0
    if parent_id is not None:
        parent_result = await db.execute(
            select(Comments).where(Comments.id == parent_id)  # type: ignore[arg-type]
        )
        parent = parent_result.scalar_one_or_none()
        if parent is None:
            raise NotFoundError("Parent comment not found")
        if parent.post_id != post_id:
            raise ValidationError("Parent comment belongs to a different post")
        depth = parent.depth + 1

    comment = Comments(
        post_id=post_id,
        parent_id=parent_id,
        content=content,
        author_username=author_username,
        depth=depth,
        votes=0,
    )
    db.add(comment)
    await db.flush()

    comment_count = await recompute_post_comment_count(db, post_id)
    await db.commit()
    await db.refresh(comment)

    logger.info(
        "comment_created",
        comment_id=comment.id,
        post_id=post_id,
        parent_id=parent_id,
        depth=depth,
        comment_count=comment_count,
    )
    return comment, comment_count


async def edit_comment(
    db: AsyncSession, comment_id: int, identity: Identity, new_content: str
) -> Comments:
    """
    Replace a comment's content and stamp updated_at.

    Raises:
        NotFoundError: comment does not exist
        AuthorizationError: identity is not the author
        ValidationError: blank content, or the comment was deleted
    """
    if not new_content or not new_content.strip():
        raise ValidationError("Comment content is required")

    comment = await get_comment(db, comment_id)
    _check_ownership(comment, identity, "edit")

    if comment.deleted_at is not None:
        raise ValidationError("Deleted comments cannot be edited")

    comment.content = new_content
    comment.updated_at = utc_now()
    await db.commit()
    await db.refresh(comment)

    logger.info("comment_edited", comment_id=comment.id, post_id=comment.post_id)
    return comment


async def soft_delete_comment(db: AsyncSession, comment_id: int, identity: Identity) -> Comments:
    """
    Soft-delete a comment.

    Author, votes, depth, parent and post are left untouched and replies are
    not affected. Deleting an already-deleted comment changes nothing.

    Raises:
        NotFoundError: comment does not exist
        AuthorizationError: identity is not the author
    """
    comment = await get_comment(db, comment_id)
    _check_ownership(comment, identity, "delete")

    if comment.deleted_at is not None:
        return comment

    comment.content = DELETED_COMMENT_TEXT
    comment.deleted_at = utc_now()
    await db.commit()
    await db.refresh(comment)

    logger.info("comment_soft_deleted", comment_id=comment.id, post_id=comment.post_id)
    return comment


async def get_comments_for_post(db: AsyncSession, post_id: int) -> list[Comments]:
    """
    Every comment on a post, soft-deleted ones included.

    Ordered by votes descending, then id ascending so equal-vote siblings keep
    a stable order through the tree builder.

    Raises:
        NotFoundError: post does not exist
    """
    await get_post_or_404(db, post_id)

    result = await db.execute(
        select(Comments)
        .where(Comments.post_id == post_id)  # type: ignore[arg-type]
        .order_by(Comments.votes.desc(), Comments.id.asc())  # type: ignore[attr-defined, union-attr]
    )
    return list(result.scalars().all())


async def get_comments_by_author(db: AsyncSession, identity: Identity) -> list[Comments]:
    """Comments recorded under any of the identity's aliases, newest first."""
    result = await db.execute(
        select(Comments)
        .where(Comments.author_username.in_(sorted(identity.aliases)))  # type: ignore[attr-defined]
        .order_by(Comments.created_at.desc(), Comments.id.desc())  # type: ignore[attr-defined, union-attr]
    )
    return list(result.scalars().all())


async def has_user_commented(db: AsyncSession, identity: Identity, post_id: int) -> bool:
    """Whether any comment on the post was written under one of the identity's aliases."""
    result = await db.execute(
        select(func.count(Comments.id)).where(  # type: ignore[arg-type]
            Comments.post_id == post_id,  # type: ignore[arg-type]
            Comments.author_username.in_(sorted(identity.aliases)),  # type: ignore[attr-defined]
        )
    )
    return (result.scalar() or 0) > 0
