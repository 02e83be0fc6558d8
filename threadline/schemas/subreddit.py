"""
Pydantic schemas for Subreddit endpoints
"""

from pydantic import Field, field_validator

from threadline.schemas.base import CamelModel, UTCDatetime


class SubredditCreate(CamelModel):
    """Schema for creating a new subreddit"""

    name: str = Field(min_length=1, max_length=100, description="Unique community name")
    description: str | None = Field(default=None, description="Community description")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class SubredditResponse(CamelModel):
    """Schema for subreddit response"""

    id: int
    name: str
    description: str | None = None
    member_count: int
    created_at: UTCDatetime
