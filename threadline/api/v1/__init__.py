"""
API v1 Router
"""

from fastapi import APIRouter

from threadline.api.v1 import auth, comments, posts, saved_posts, subreddits, users, votes

router = APIRouter()

# Include all endpoint routers
router.include_router(auth.router)
router.include_router(subreddits.router)
router.include_router(posts.router)
router.include_router(comments.router)
router.include_router(votes.router)
router.include_router(saved_posts.router)
router.include_router(users.router)

__all__ = ["router"]
