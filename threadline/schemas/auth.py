"""
Pydantic schemas for identity endpoints
"""

from threadline.schemas.base import CamelModel


class IdentityResponse(CamelModel):
    """The verified identity behind the current request"""

    user_id: str
    email: str | None = None
    first_name: str | None = None
    display_name: str
    aliases: list[str]
