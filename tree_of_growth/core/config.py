"""Configuration management for tree_of_growth."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Configuration
    sqlite_db_path: str = Field(
        default="./data/tree_of_growth.db", description="SQLite file backing the key-value store"
    )
    user_assets_dir: str = Field(
        default="./data/user_assets", description="Directory where imported user images are copied"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    # HTTP Server Configuration
    host: str = Field(default="127.0.0.1", description="Interface the API server binds to")
    port: int = Field(default=8000, description="Port the API server listens on")

    environment: str = Field(default="development", description="Deployment environment name")


# Application Constants
class Constants:
    """Application-wide constants."""

    # Growth points awarded per completed task, keyed by priority
    POINTS_LOW: int = 1
    POINTS_MEDIUM: int = 2
    POINTS_HIGH: int = 3

    # Levels
    POINTS_PER_LEVEL: int = 10
    LEVEL_PROGRESS_STEPS: int = 10  # Home screen shows "N / 10 to next level"

    # Visual cap on rendered leaves; does not affect scoring
    MAX_VISIBLE_LEAVES: int = 100

    # Stage thresholds (minimum level), evaluated highest first
    STAGE_BLOOMING_TREE_LEVEL: int = 20
    STAGE_BIG_TREE_LEVEL: int = 15
    STAGE_SMALL_TREE_LEVEL: int = 10
    STAGE_SPROUT_LEVEL: int = 5

    # Motivational message thresholds
    STREAK_AMAZING_DAYS: int = 7
    STREAK_GREAT_DAYS: int = 3

    # Storage keys
    STORAGE_KEY_TASKS: str = "@tree_of_growth:tasks"
    STORAGE_KEY_TREE_STATE: str = "@tree_of_growth:tree_state"
    STORAGE_KEY_USER_IMAGES: str = "@tree_of_growth:user_images"
    STORAGE_KEY_SETTINGS: str = "@tree_of_growth:settings"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
