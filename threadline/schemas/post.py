"""
Pydantic schemas for Post endpoints
"""

from pydantic import Field, field_validator

from threadline.schemas.base import CamelModel, UTCDatetime


def _strip_title(v: str | None) -> str | None:
    """Titles are trimmed and must not be blank."""
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("title must not be blank")
    return v


class PostCreate(CamelModel):
    """
    Schema for creating a new post.

    The author is taken from the caller's identity, and votes/commentCount
    always start at zero, so none of them are accepted here.
    """

    title: str = Field(min_length=1, max_length=300, description="Post title")
    content: str | None = Field(default=None, description="Text body")
    image_url: str | None = Field(default=None, max_length=2048, description="Image URL")
    link_url: str | None = Field(default=None, max_length=2048, description="Link URL")
    subreddit_id: int | None = Field(default=None, description="Community to post in")

    @field_validator("title")
    @classmethod
    def sanitize_title(cls, v: str) -> str:
        return _strip_title(v)  # type: ignore[return-value]


class PostUpdate(CamelModel):
    """
    Schema for updating a post.

    Only fields present in the request are changed. Denormalized counters are
    not part of this schema and cannot be written by clients.
    """

    title: str | None = Field(default=None, min_length=1, max_length=300)
    content: str | None = None
    image_url: str | None = Field(default=None, max_length=2048)
    link_url: str | None = Field(default=None, max_length=2048)
    subreddit_id: int | None = None

    @field_validator("title")
    @classmethod
    def sanitize_title(cls, v: str | None) -> str | None:
        return _strip_title(v)


class PostResponse(CamelModel):
    """Schema for post response - what API returns"""

    id: int
    title: str
    content: str | None = None
    image_url: str | None = None
    link_url: str | None = None
    author_username: str
    subreddit_id: int | None = None
    votes: int
    comment_count: int
    created_at: UTCDatetime


class PostListResponse(CamelModel):
    """Schema for paginated post list"""

    total: int
    page: int
    limit: int
    posts: list[PostResponse]
