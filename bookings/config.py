from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Auth
    BASE_PASSWORD: str = ""  # empty disables login
    JWT_SECRET: str = ""
    JWT_EXPIRES_DAYS: int = 7

    # Storage
    STORAGE: Literal["sqlite", "memory"] = "sqlite"
    DATABASE_PATH: str = "events.db"

    # CORS
    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:5173",
        "https://allforone-theta.vercel.app",
    ]
    # Preview deployments, e.g. allforone-git-main-<team>.vercel.app
    ALLOWED_ORIGIN_REGEX: str = r"^https://allforone(-[a-z0-9-]+)?\.vercel\.app$"

    # Roster offered by the booking form
    DANCERS: list[str] = [
        "Gorceag Sergiu",
        "Popescu Ana",
        "Ionescu Mihai",
        "Rusu Maria",
        "Balan Andrei",
        "Ceban Elena",
    ]

    HOST: str = "0.0.0.0"
    PORT: int = 3001
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
