"""
Application Configuration
Uses Pydantic Settings for environment-based configuration
"""

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra env vars like MARIADB_* used by docker-compose
    )

    # Application
    PROJECT_NAME: str = "Threadline API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    DEBUG: bool = Field(default=False)
    API_V1_STR: str = "/api/v1"

    # Identity tokens (issued by the external identity provider, verified here)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # CORS
    # Allow str because it can be a comma-separated string in .env
    CORS_ORIGINS: str | list[str] = Field(
        default=["http://localhost:5173", "http://localhost:8000"]
    )

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Comment threads
    COMMENT_TREE_MAX_DEPTH: int = 50  # Replies nested deeper than this are not rendered

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v


# Create global settings instance

load_dotenv()
settings = Settings()  # type: ignore[call-arg]


# Replaces comment content on soft delete. Clients compare against this
# exact string to render deleted styling, so it must never change.
DELETED_COMMENT_TEXT = "Comment deleted by user"

# Display name used when an identity carries neither first name nor email
ANONYMOUS_DISPLAY_NAME = "anonymous"


class VoteType:
    """Vote type constants"""

    UP = 1
    DOWN = -1

    ALL = (UP, DOWN)


class VoteAction:
    """Outcome of casting a vote"""

    CREATED = "created"
    UPDATED = "updated"
    REMOVED = "removed"


class PostSort:
    """Post listing sort orders"""

    HOT = "hot"  # votes, then comment count
    NEW = "new"  # newest first
    TOP = "top"  # votes only
