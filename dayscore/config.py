"""
DayScore configuration.
Loads variables from the .env file.
"""

from typing import Any

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database URL (Railway/Render format)
    # If set, overrides PostgreSQL individual vars
    DATABASE_URL: str | None = None

    # PostgreSQL (individual vars, fallback if DATABASE_URL not set)
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "dayscore"
    POSTGRES_USER: str = "dayscore"
    POSTGRES_PASSWORD: SecretStr | None = None

    # Generate tables on API startup (dev only, production uses aerich)
    DB_GENERATE_SCHEMAS: bool = False

    # Environment (development | production)
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Day buckets: a day runs from DAY_CUTOFF_HOUR to DAY_CUTOFF_HOUR
    # in the reference timezone, not midnight to midnight.
    REFERENCE_TIMEZONE: str = "Europe/London"
    DAY_CUTOFF_HOUR: int = 4

    # Conditional writes that lose a race are retried this many times in total
    MAX_WRITE_ATTEMPTS: int = 5

    # Extra CORS origins for the API (comma separated or JSON list)
    API_CORS_ORIGINS: list[str] = []

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @field_validator("DAY_CUTOFF_HOUR")
    @classmethod
    def check_cutoff_hour(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError("DAY_CUTOFF_HOUR must be between 0 and 23")
        return v

    @field_validator("MAX_WRITE_ATTEMPTS")
    @classmethod
    def check_write_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MAX_WRITE_ATTEMPTS must be at least 1")
        return v

    @field_validator("API_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[Any]) -> list[str]:
        if isinstance(v, str):
            if not v.strip():
                return []
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                import json

                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [x.strip().rstrip("/") for x in v.split(",") if x.strip()]
        return v

    @property
    def database_url(self) -> str:
        """
        Get database URL based on environment.

        Priority:
        1. DATABASE_URL env var (Railway/Render format)
        2. PostgreSQL individual vars (production)
        3. SQLite (development)
        """
        # 1. Use DATABASE_URL if provided (Railway/Render)
        if self.DATABASE_URL:
            return self.DATABASE_URL

        # 2. Production: construct from individual vars
        if self.ENVIRONMENT == "production":
            if not self.POSTGRES_PASSWORD:
                raise ValueError("POSTGRES_PASSWORD required for production")
            return (
                f"postgres://{self.POSTGRES_USER}:"
                f"{self.POSTGRES_PASSWORD.get_secret_value()}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        # 3. Development: SQLite
        return "sqlite://db.sqlite3"


config = Settings()
