"""
Subreddits API endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from threadline.core.auth import CurrentIdentity
from threadline.core.database import get_db
from threadline.schemas.subreddit import SubredditCreate, SubredditResponse
from threadline.services import subreddits as subreddit_service

router = APIRouter(prefix="/subreddits", tags=["subreddits"])


@router.get("/", response_model=list[SubredditResponse])
async def list_subreddits(db: AsyncSession = Depends(get_db)) -> list[SubredditResponse]:
    """List all communities, largest first."""
    subreddits = await subreddit_service.list_subreddits(db)
    return [SubredditResponse.model_validate(subreddit) for subreddit in subreddits]


@router.get("/{subreddit_id}", response_model=SubredditResponse)
async def get_subreddit(subreddit_id: int, db: AsyncSession = Depends(get_db)) -> SubredditResponse:
    """Get a single community by ID."""
    subreddit = await subreddit_service.get_subreddit(db, subreddit_id)
    return SubredditResponse.model_validate(subreddit)


@router.post("/", response_model=SubredditResponse, status_code=status.HTTP_201_CREATED)
async def create_subreddit(
    subreddit_data: SubredditCreate,
    identity: CurrentIdentity,
    db: AsyncSession = Depends(get_db),
) -> SubredditResponse:
    """
    Create a new community.

    Community names are unique; a duplicate name returns 409.
    """
    subreddit = await subreddit_service.create_subreddit(
        db, subreddit_data.name, subreddit_data.description
    )
    return SubredditResponse.model_validate(subreddit)
