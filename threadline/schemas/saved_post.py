"""
Pydantic schemas for saved-post endpoints
"""

from pydantic import Field

from threadline.schemas.base import CamelModel
from threadline.schemas.post import PostResponse


class SaveToggleRequest(CamelModel):
    """Schema for toggling a saved post"""

    post_id: int = Field(description="Post to save or unsave")


class SavedStatusResponse(CamelModel):
    """Whether a post is saved by the caller"""

    post_id: int
    saved: bool


class SavedPostListResponse(CamelModel):
    """Posts saved by the caller, most recently saved first"""

    total: int
    posts: list[PostResponse]
