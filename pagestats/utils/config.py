# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv.
"""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file before any settings are instantiated
load_dotenv()


class PostgresSettings(BaseSettings):
    """PostgreSQL connection settings for the CMS database."""

    model_config = SettingsConfigDict(env_prefix="PG_")

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL username")
    password: str = Field(default="", description="PostgreSQL password")
    database: str = Field(default="cms", description="Database name")
    schema_name: str = Field(default="cms", description="Schema name")
    sslmode: str = Field(default="prefer", description="SSL mode")

    @property
    def connection_string(self) -> str:
        """Build PostgreSQL connection string."""
        return (
            f"postgresql://{self.user}:{self.password}@"
            f"{self.host}:{self.port}/{self.database}?sslmode={self.sslmode}"
        )


class AnalyticsSettings(BaseSettings):
    """Session reconstruction and report settings."""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    session_timeout_minutes: int = Field(
        default=30, description="Inactivity gap in minutes that starts a new session"
    )
    last_event_seconds: int = Field(
        default=30, description="Dwell time assigned to the last view of a session"
    )
    min_dwell_seconds: int = Field(default=1, description="Lower clamp for dwell times")
    max_dwell_seconds: int = Field(default=1800, description="Upper clamp for dwell times")
    page_details_limit: int = Field(default=20, description="Page details shown per report")
    popular_pages_limit: int = Field(default=10, description="Popular pages shown per report")
    default_range: str = Field(
        default="7days", description="Default date range (24h, 7days, 30days, 90days)"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    # Nested settings
    postgres: PostgresSettings = Field(default_factory=PostgresSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)

    # General settings
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
