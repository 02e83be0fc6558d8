"""
Identity API endpoints

Tokens are issued by the external identity provider; this service only
verifies them and reports who the caller is.
"""

from fastapi import APIRouter

from threadline.core.auth import CurrentIdentity
from threadline.schemas.auth import IdentityResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/user", response_model=IdentityResponse)
async def get_user(identity: CurrentIdentity) -> IdentityResponse:
    """
    Get the verified identity behind the current request.

    `aliases` lists every name this caller's content may be recorded under.
    """
    return IdentityResponse(
        user_id=identity.user_id,
        email=identity.email,
        first_name=identity.first_name,
        display_name=identity.display_name,
        aliases=sorted(identity.aliases),
    )
