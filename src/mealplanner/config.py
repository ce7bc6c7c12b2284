"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "postgresql+asyncpg://localhost/mealplanner"

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = ""  # "json" forces structured logs
    allowed_origins: str = "http://localhost:5173,http://localhost:8000"

    # Caller identity used when no X-User-Id header is sent
    default_user_id: str = "default-user"

    # Limits
    meal_plan_max_range_days: int = 90
    default_page_limit: int = 20
    max_page_limit: int = 100

    # Nutrition lookups
    nutrition_search_limit: int = 10

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    def clamp_limit(self, limit: int | None) -> int:
        """Apply the default page size and the upper bound to a requested limit."""
        if limit is None or limit <= 0:
            return self.default_page_limit
        return min(limit, self.max_page_limit)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
