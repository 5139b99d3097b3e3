"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "PrepWise Evaluation API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json, console

    # Claude AI (generation service)
    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-sonnet-4-5-20250929"
    CLAUDE_MAX_TOKENS: int = 4096
    GENERATION_TIMEOUT_SECONDS: float = 60.0  # Per-call network timeout

    # Scoring
    DEFAULT_RUBRIC_SCORE: float = 5.0  # Substituted for missing/invalid scores
    PROFILE_HIGHLIGHT_LIMIT: int = 5  # Summary bullets sent with each response
    ESSAY_MAX_WORDS: int = 500

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    @property
    def generation_configured(self) -> bool:
        """Whether an API key for the generation service is present."""
        return bool(self.ANTHROPIC_API_KEY)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
