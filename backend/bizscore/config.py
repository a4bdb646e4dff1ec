"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Database
    DATABASE_URL: str

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # External scoring oracle
    ORACLE_BASE_URL: str = "http://localhost:8000"
    ORACLE_CONNECT_TIMEOUT: float = 5.0
    ORACLE_READ_TIMEOUT: float = 10.0

    # Oracle retry policy (transport failures only)
    ORACLE_RETRY_ATTEMPTS: int = 3
    ORACLE_BACKOFF_INITIAL: float = 1.0
    ORACLE_BACKOFF_MULTIPLIER: float = 2.0
    ORACLE_BACKOFF_MAX: float = 4.0

    # Fallback scorer bucket thresholds
    FALLBACK_LOW_THRESHOLD: float = 0.7
    FALLBACK_MEDIUM_THRESHOLD: float = 0.4

    # Batch scoring
    BATCH_MAX_WORKERS: int = 10
    BATCH_MAX_SIZE: int = 100

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 100
    RATE_LIMIT_PER_HOUR: int = 1000
    RATE_LIMIT_CLEANUP_INTERVAL: int = 60

    # Score cache
    CACHE_TTL_SECONDS: int = 600
    CACHE_MAX_SIZE: int = 1000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


# Global settings instance
settings = Settings()
