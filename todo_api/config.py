"""Configuration settings for the Todo API."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Application settings loaded from environment variables."""

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")
    DB_HOST: str | None = os.getenv("DB_HOST")
    DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
    DB_USERNAME: str = os.getenv("DB_USERNAME", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
    DB_NAME: str = os.getenv("DB_NAME", "todoapp")
    DB_SSLMODE: str = os.getenv("DB_SSLMODE", "disable")
    AUTO_MIGRATE: bool = os.getenv("AUTO_MIGRATE", "true").lower() == "true"

    # JWT
    JWT_SECRET: str = os.getenv("JWT_SECRET", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRATION_HOURS: int = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))

    # Passwords
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # CORS
    CORS_ALLOW_ORIGINS: list[str] = _split(os.getenv("CORS_ALLOW_ORIGINS", "*"))
    CORS_ALLOW_METHODS: list[str] = _split(os.getenv("CORS_ALLOW_METHODS", "GET,POST,PUT,PATCH,DELETE,OPTIONS"))
    CORS_ALLOW_HEADERS: list[str] = _split(
        os.getenv("CORS_ALLOW_HEADERS", "Origin,Content-Type,Accept,Authorization")
    )
    CORS_ALLOW_CREDENTIALS: bool = os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"

    def __init__(self) -> None:
        self._generated_secret: str | None = None
        if not self.JWT_SECRET:
            self._generated_secret = self.JWT_SECRET = secrets.token_urlsafe(32)

    @property
    def database_url(self) -> str:
        """Resolve the SQLAlchemy URL: explicit URL, then Postgres components, then local SQLite."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DB_HOST:
            return (
                f"postgresql+psycopg2://{self.DB_USERNAME}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?sslmode={self.DB_SSLMODE}"
            )
        return "sqlite:///./todo_api.db"

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        warnings = []
        if self._generated_secret and self.JWT_SECRET == self._generated_secret:
            warnings.append("JWT_SECRET is not set - using auto-generated key (not persistent across restarts)")
        if self.JWT_EXPIRATION_HOURS <= 0:
            warnings.append(f"JWT_EXPIRATION_HOURS={self.JWT_EXPIRATION_HOURS} - every issued token is already expired")
        if "*" in self.CORS_ALLOW_ORIGINS and self.APP_ENV == "production":
            warnings.append("CORS_ALLOW_ORIGINS allows any origin in production")
        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
