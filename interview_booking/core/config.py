from __future__ import annotations

import os
from zoneinfo import ZoneInfo

from pydantic import AliasChoices, Field

from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_files() -> list[str]:
    env = os.getenv("IB_ENVIRONMENT", "").strip().lower()
    files = [".env"]
    if env and env != "development":
        files.append(f".env.{env}")
    else:
        files.append(".env.local")
    return files


class Settings(BaseSettings):
    app_name: str = "Interview Booking"
    environment: str = "development"

    database_url: str = Field(
        validation_alias=AliasChoices("IB_DATABASE_URL", "DATABASE_URL"),
    )
    calendar_timezone: str = "Asia/Kolkata"

    # Empty disables the per-transaction override. SQLite runs anything it lacks as SERIALIZABLE.
    booking_isolation_level: str = "REPEATABLE READ"

    generation_weeks: int = Field(default=2, ge=1)
    default_page_size: int = Field(default=20, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    log_level: str = "INFO"
    auto_create_tables: bool = True

    model_config = SettingsConfigDict(env_prefix="IB_", env_file=_env_files(), extra="ignore")

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.calendar_timezone)


settings = Settings()
