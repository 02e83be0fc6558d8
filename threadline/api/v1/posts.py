"""
Posts API endpoints

Posts plus the two comment views of a post: the flat list and the threaded
tree.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.api.dependencies import PaginationParams
from threadline.config import PostSort, settings
from threadline.core.auth import CurrentIdentity
from threadline.core.database import get_db
from threadline.schemas.comment import CommentListResponse, CommentResponse, CommentTreeResponse
from threadline.schemas.post import PostCreate, PostListResponse, PostResponse, PostUpdate
from threadline.services import comment_store
from threadline.services import posts as post_service
from threadline.services.comment_tree import build_comment_tree, limit_tree_depth

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=PostListResponse)
async def list_posts(
    pagination: Annotated[PaginationParams, Depends()],
    sort_by: Annotated[
        Literal["hot", "new", "top"], Query(alias="sortBy", description="Sort order")
    ] = PostSort.HOT,
    subreddit_id: Annotated[
        int | None, Query(alias="subredditId", description="Filter by community")
    ] = None,
    search: Annotated[str | None, Query(description="Search in post titles")] = None,
    db: AsyncSession = Depends(get_db),
) -> PostListResponse:
    """
    List posts with sorting, community filtering and title search.

    **Sort orders:**
    - `hot` (default): votes, then comment count
    - `new`: newest first
    - `top`: votes

    When `search` is given the results are title matches ordered by votes and
    `sortBy`/`subredditId` are ignored.

    **Examples:**
    - `/posts?sortBy=new` - Newest posts
    - `/posts?subredditId=3&page=2` - Second page of community 3
    - `/posts?search=python` - Posts with "python" in the title
    """
    if search and search.strip():
        posts, total = await post_service.search_posts(
            db, search.strip(), offset=pagination.offset, limit=pagination.limit
        )
    else:
        posts, total = await post_service.list_posts(
            db,
            subreddit_id=subreddit_id,
            sort_by=sort_by,
            offset=pagination.offset,
            limit=pagination.limit,
        )

    return PostListResponse(
        total=total,
        page=pagination.page,
        limit=pagination.limit,
        posts=[PostResponse.model_validate(post) for post in posts],
    )


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: AsyncSession = Depends(get_db)) -> PostResponse:
    """Get a single post by ID."""
    post = await comment_store.get_post_or_404(db, post_id)
    return PostResponse.model_validate(post)


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    """
    Create a new post.

    The author is the caller's display name. Title is required; content,
    image URL and link URL may be combined freely.
    """
    post = await post_service.create_post(db, identity, post_data.model_dump())
    return PostResponse.model_validate(post)


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    """
    Edit a post.

    Only fields present in the request body are changed. Only the author may
    edit; vote and comment counters are never writable.
    """
    post = await post_service.update_post(
        db, post_id, identity, post_data.model_dump(exclude_unset=True)
    )
    return PostResponse.model_validate(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """
    Permanently delete a post with its comments, votes and saves.

    Only the author may delete.
    """
    await post_service.delete_post(db, post_id, identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{post_id}/comments", response_model=CommentListResponse)
async def get_post_comments(post_id: int, db: AsyncSession = Depends(get_db)) -> CommentListResponse:
    """
    Get every comment on a post as a flat list.

    Ordered by votes, highest first. Soft-deleted comments are included so
    their replies keep a parent.
    """
    comments = await comment_store.get_comments_for_post(db, post_id)
    return CommentListResponse(
        total=len(comments),
        comments=[CommentResponse.model_validate(comment) for comment in comments],
    )


@router.get("/{post_id}/comments/tree", response_model=CommentTreeResponse)
async def get_post_comment_tree(
    post_id: int, db: AsyncSession = Depends(get_db)
) -> CommentTreeResponse:
    """
    Get the comments on a post threaded into reply trees.

    Roots and replies keep the flat list's vote order. Replies nested deeper
    than COMMENT_TREE_MAX_DEPTH levels are not rendered.
    """
    comments = await comment_store.get_comments_for_post(db, post_id)
    roots = limit_tree_depth(build_comment_tree(comments), settings.COMMENT_TREE_MAX_DEPTH)
    comment_count = await comment_store.get_post_comment_count(db, post_id)
    return CommentTreeResponse(post_id=post_id, comment_count=comment_count, comments=roots)
