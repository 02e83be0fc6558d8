"""
Pydantic schemas for Comment endpoints
"""

from __future__ import annotations

from pydantic import Field, computed_field, field_validator

from threadline.schemas.base import CamelModel, UTCDatetime, UTCDatetimeOptional


class CommentCreate(CamelModel):
    """Schema for creating a new comment"""

    post_id: int = Field(description="ID of post to comment on")
    content: str = Field(min_length=1, description="Comment text")
    parent_id: int | None = Field(
        default=None,
        description="Parent comment ID for replies (null = top-level comment)",
    )

    @field_validator("content")
    @classmethod
    def sanitize_content(cls, v: str) -> str:
        """Trim whitespace; whitespace-only comments are rejected."""
        v = v.strip()
        if not v:
            raise ValueError("content must not be blank")
        return v


class CommentUpdate(CamelModel):
    """Schema for editing a comment"""

    content: str = Field(min_length=1, description="Comment text")

    @field_validator("content")
    @classmethod
    def sanitize_content(cls, v: str) -> str:
        """Trim whitespace; whitespace-only comments are rejected."""
        v = v.strip()
        if not v:
            raise ValueError("content must not be blank")
        return v


class CommentResponse(CamelModel):
    """
    Schema for comment response - what API returns.

    Soft-deleted comments are returned too; their content is the deletion
    placeholder and deletedAt is set.
    """

    id: int
    content: str
    author_username: str
    post_id: int
    parent_id: int | None = None
    depth: int
    votes: int
    created_at: UTCDatetime
    updated_at: UTCDatetimeOptional = None
    deleted_at: UTCDatetimeOptional = None

    @computed_field(alias="isDeleted")  # type: ignore[prop-decorator]
    @property
    def is_deleted(self) -> bool:
        """True once the comment has been soft-deleted"""
        return self.deleted_at is not None


class CommentMutationResponse(CommentResponse):
    """
    Comment returned from create/edit/delete.

    Carries the post's recomputed comment count so clients can replace any
    optimistic value with the server's.
    """

    post_comment_count: int


class CommentNode(CommentResponse):
    """A comment with its direct replies, nested recursively."""

    replies: list[CommentNode] = Field(default_factory=list)


class CommentListResponse(CamelModel):
    """Flat comment list for a post, in wire order (votes descending)"""

    total: int
    comments: list[CommentResponse]


class CommentTreeResponse(CamelModel):
    """Threaded comments for a post"""

    post_id: int
    comment_count: int
    comments: list[CommentNode]


class UserCommentedResponse(CamelModel):
    """Whether the caller has commented on a post"""

    post_id: int
    has_commented: bool
