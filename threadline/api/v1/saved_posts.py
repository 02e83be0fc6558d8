"""
Saved posts API endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.core.auth import CurrentIdentity, OptionalIdentity
from threadline.core.database import get_db
from threadline.schemas.post import PostResponse
from threadline.schemas.saved_post import (
    SavedPostListResponse,
    SavedStatusResponse,
    SaveToggleRequest,
)
from threadline.services import saved_posts as saved_service

router = APIRouter(prefix="/saved-posts", tags=["saved-posts"])


@router.get("/", response_model=SavedPostListResponse)
async def list_saved_posts(
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> SavedPostListResponse:
    """List the caller's saved posts, most recently saved first."""
    posts = await saved_service.list_saved(db, identity.user_id)
    return SavedPostListResponse(
        total=len(posts),
        posts=[PostResponse.model_validate(post) for post in posts],
    )


@router.get("/{post_id}", response_model=SavedStatusResponse)
async def get_saved_status(
    post_id: Annotated[int, Path(description="Post ID")],
    identity: OptionalIdentity,
    db: AsyncSession = Depends(get_db),
) -> SavedStatusResponse:
    """
    Whether the caller has saved a post.

    Anonymous callers always get `saved: false`.
    """
    user_id = identity.user_id if identity else None
    saved = await saved_service.is_saved(db, user_id, post_id)
    return SavedStatusResponse(post_id=post_id, saved=saved)


@router.post(
    "/",
    response_model=SavedStatusResponse,
    responses={201: {"model": SavedStatusResponse}},
)
async def toggle_saved_post(
    toggle_data: SaveToggleRequest,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """
    Save a post, or unsave it if already saved.

    Returns 201 Created when the post becomes saved and 200 OK when it is
    unsaved.
    """
    saved = await saved_service.toggle_save(db, identity.user_id, toggle_data.post_id)
    response = SavedStatusResponse(post_id=toggle_data.post_id, saved=saved)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if saved else status.HTTP_200_OK,
        content=response.model_dump(mode="json", by_alias=True),
    )


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unsave_post(
    post_id: Annotated[int, Path(description="Post ID")],
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Remove a post from the caller's saved posts."""
    removed = await saved_service.unsave(db, identity.user_id, post_id)
    if not removed:
        raise HTTPException(status_code=404, detail="Post is not saved")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
