"""
Comments API endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.core.auth import CurrentIdentity
from threadline.core.database import get_db
from threadline.models import Comments
from threadline.schemas.comment import (
    CommentCreate,
    CommentMutationResponse,
    CommentResponse,
    CommentUpdate,
    UserCommentedResponse,
)
from threadline.services import comment_store

router = APIRouter(prefix="/comments", tags=["comments"])


def _mutation_response(comment: Comments, post_comment_count: int) -> CommentMutationResponse:
    base = dict(CommentResponse.model_validate(comment))
    return CommentMutationResponse(**base, post_comment_count=post_comment_count)


@router.post("/", response_model=CommentMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> CommentMutationResponse:
    """
    Comment on a post or reply to a comment.

    Set `parentId` to reply; the parent must be on the same post. The response
    carries the post's recomputed `postCommentCount`.
    """
    comment, comment_count = await comment_store.create_comment(
        db,
        post_id=comment_data.post_id,
        author_username=identity.display_name,
        content=comment_data.content,
        parent_id=comment_data.parent_id,
    )
    return _mutation_response(comment, comment_count)


@router.get("/user-commented/{post_id}", response_model=UserCommentedResponse)
async def user_commented(
    post_id: int,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> UserCommentedResponse:
    """Whether the caller has commented on a post under any of their names."""
    has_commented = await comment_store.has_user_commented(db, identity, post_id)
    return UserCommentedResponse(post_id=post_id, has_commented=has_commented)


@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(comment_id: int, db: AsyncSession = Depends(get_db)) -> CommentResponse:
    """Get a single comment by ID."""
    comment = await comment_store.get_comment(db, comment_id)
    return CommentResponse.model_validate(comment)


@router.patch("/{comment_id}", response_model=CommentMutationResponse)
async def edit_comment(
    comment_id: int,
    comment_data: CommentUpdate,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> CommentMutationResponse:
    """
    Edit your own comment.

    Deleted comments cannot be edited.
    """
    comment = await comment_store.edit_comment(db, comment_id, identity, comment_data.content)
    comment_count = await comment_store.get_post_comment_count(db, comment.post_id)
    return _mutation_response(comment, comment_count)


@router.delete("/{comment_id}", response_model=CommentMutationResponse)
async def delete_comment(
    comment_id: int,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> CommentMutationResponse:
    """
    Soft-delete your own comment.

    The comment stays in the thread with placeholder content so its replies
    remain attached. The post's comment count does not change.
    """
    comment = await comment_store.soft_delete_comment(db, comment_id, identity)
    comment_count = await comment_store.get_post_comment_count(db, comment.post_id)
    return _mutation_response(comment, comment_count)
