# tasktracker/config.py
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # PostgreSQL
    POSTGRES_USER: str = Field("todo_user")
    POSTGRES_PASSWORD: str = Field("StrongPassword123!")
    POSTGRES_DB: str = Field("todo")
    POSTGRES_HOST: str = Field("localhost")
    POSTGRES_PORT: int = Field(5432)
    # Full SQLAlchemy URL, wins over the POSTGRES_* parts when set
    DATABASE_URL: Optional[str] = Field(None)

    # Listing
    DEFAULT_PAGE_SIZE: int = Field(10, ge=1)
    MAX_PAGE_SIZE: int = Field(100, ge=1)

    # Logging
    LOG_LEVEL: str = Field("INFO")
    LOG_FILE: Optional[str] = Field(None)

    # Where the client package talks to by default
    API_BASE_URL: str = Field("http://localhost:8000")

    # Load from environment and (optionally) a .env file
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

def settings() -> Settings:
    return Settings()

@lru_cache
def get_settings() -> Settings:
    return settings()
