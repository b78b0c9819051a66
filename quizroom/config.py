"""
Configuration management for the application
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./quizroom.db",
        description="SQLAlchemy async database URL",
    )
    db_schema: str | None = Field(
        default=None, description="Schema namespace holding the quiz tables"
    )
    db_echo: bool = Field(default=False, description="Echo SQL statements")

    # Connection pool
    pool_size: int = Field(default=5, description="Persistent pool connections")
    max_overflow: int = Field(default=10, description="Extra connections above pool_size")
    pool_timeout: float = Field(
        default=30.0, description="Seconds to wait for a pooled connection"
    )

    # Requests
    request_timeout: float = Field(
        default=10.0, description="Seconds before a request is cancelled"
    )

    # Security
    secret_key: str = Field(
        default="dev-secret-key-change-in-production",
        description="Secret key for HMAC cookie signing",
    )
    session_max_age: int = Field(
        default=86400, description="Identity cookie lifetime (seconds)"
    )

    # Rooms
    event_key_length: int = Field(
        default=8, ge=4, le=32, description="Length of generated event keys"
    )

    # Debug endpoints and logging
    debug: bool = Field(default=False, description="Expose database debug routes")
    log_level: str = Field(default="INFO", description="Root log level")

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite"""
        return self.database_url.startswith("sqlite")


# Global settings instance
settings = Settings()
