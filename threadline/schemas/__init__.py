"""
Pydantic schemas for API responses and requests
"""

from threadline.schemas.auth import IdentityResponse
from threadline.schemas.comment import (
    CommentCreate,
    CommentListResponse,
    CommentMutationResponse,
    CommentNode,
    CommentResponse,
    CommentTreeResponse,
    CommentUpdate,
    UserCommentedResponse,
)
from threadline.schemas.post import PostCreate, PostListResponse, PostResponse, PostUpdate
from threadline.schemas.saved_post import (
    SavedPostListResponse,
    SavedStatusResponse,
    SaveToggleRequest,
)
from threadline.schemas.subreddit import SubredditCreate, SubredditResponse
from threadline.schemas.vote import VoteCreate, VoteResponse, VoteResultResponse

__all__ = [
    # Identity schemas
    "IdentityResponse",
    # Subreddit schemas
    "SubredditCreate",
    "SubredditResponse",
    # Post schemas
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostListResponse",
    # Comment schemas
    "CommentCreate",
    "CommentUpdate",
    "CommentResponse",
    "CommentMutationResponse",
    "CommentNode",
    "CommentListResponse",
    "CommentTreeResponse",
    "UserCommentedResponse",
    # Vote schemas
    "VoteCreate",
    "VoteResponse",
    "VoteResultResponse",
    # Saved post schemas
    "SaveToggleRequest",
    "SavedStatusResponse",
    "SavedPostListResponse",
]
