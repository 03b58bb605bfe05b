"""Application settings and configuration.

This module defines all configuration options for the Pintwatch service,
including the constants that drive the consensus engine. Settings are loaded
from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Pintwatch", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./pintwatch.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Amenity consensus
    amenity_quorum: int = Field(default=3, alias="AMENITY_QUORUM")
    # 1 = strict majority; larger values require a wider lead before a flip.
    amenity_min_margin: int = Field(default=1, alias="AMENITY_MIN_MARGIN")

    # Price confidence
    price_high_confidence_threshold: int = Field(
        default=3,
        alias="PRICE_HIGH_CONFIDENCE_THRESHOLD",
    )
    price_verification_window_days: int = Field(
        default=30,
        alias="PRICE_VERIFICATION_WINDOW_DAYS",
    )
    price_fresh_days: int = Field(default=7, alias="PRICE_FRESH_DAYS")
    price_stale_days: int = Field(default=90, alias="PRICE_STALE_DAYS")

    # Opening hours
    closing_soon_minutes: int = Field(default=60, alias="CLOSING_SOON_MINUTES")
    local_timezone: str = Field(default="Europe/Dublin", alias="LOCAL_TIMEZONE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for Alembic migrations."""
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def engine_constants(self) -> dict[str, object]:
        """Return the consensus engine constants as a convenience dictionary."""
        return {
            "amenity_quorum": self.amenity_quorum,
            "amenity_min_margin": self.amenity_min_margin,
            "price_high_confidence_threshold": self.price_high_confidence_threshold,
            "price_verification_window_days": self.price_verification_window_days,
            "price_fresh_days": self.price_fresh_days,
            "price_stale_days": self.price_stale_days,
            "closing_soon_minutes": self.closing_soon_minutes,
        }


settings = Settings()
