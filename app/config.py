# app/config.py
"""
Application settings, read from ``CATALOG_*`` environment variables
(or a ``.env`` file) with pydantic-settings.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_title: str = "Library Catalog API"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    seed_sample_books: bool = True
    # None means the sample_books.json bundled with app.catalog
    sample_books_file: Optional[Path] = None

    loan_period_days: int = Field(default=14, ge=1)
    recommendation_count: int = Field(default=3, ge=0)

    # Off: validation errors -> 500, conflicts -> 404 (legacy behaviour).
    # On: 400 / 404 / 409 with the error's own message.
    strict_error_status: bool = False

    model_config = SettingsConfigDict(env_prefix="CATALOG_", env_file=".env", extra="ignore")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
