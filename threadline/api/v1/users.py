"""
User profile API endpoints

The caller's own activity. Content is matched by any of the caller's
aliases, since posts and comments store a free-text author name.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.core.auth import CurrentIdentity
from threadline.core.database import get_db
from threadline.schemas.comment import CommentListResponse, CommentResponse
from threadline.schemas.post import PostResponse
from threadline.schemas.saved_post import SavedPostListResponse
from threadline.services import comment_store, saved_posts
from threadline.services import posts as post_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me/posts", response_model=list[PostResponse])
async def get_my_posts(
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> list[PostResponse]:
    """Posts written by the caller, newest first."""
    posts = await post_service.get_posts_by_author(db, identity)
    return [PostResponse.model_validate(post) for post in posts]


@router.get("/me/comments", response_model=CommentListResponse)
async def get_my_comments(
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> CommentListResponse:
    """Comments written by the caller across all posts, newest first."""
    comments = await comment_store.get_comments_by_author(db, identity)
    return CommentListResponse(
        total=len(comments),
        comments=[CommentResponse.model_validate(comment) for comment in comments],
    )


@router.get("/me/saved", response_model=SavedPostListResponse)
async def get_my_saved_posts(
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> SavedPostListResponse:
    """Posts the caller has saved, most recently saved first."""
    posts = await saved_posts.list_saved(db, identity.user_id)
    return SavedPostListResponse(
        total=len(posts),
        posts=[PostResponse.model_validate(post) for post in posts],
    )
