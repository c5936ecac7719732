from __future__ import annotations

from functools import cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Relative to the working directory.
DEFAULT_DATABASE_URL = "sqlite:///artifacts/fx_quotes.db"

RatesSource = Literal["database", "open-exchange-rates"]


class AppSettings(BaseSettings):
    database_url: str = DEFAULT_DATABASE_URL
    rates_source: RatesSource = "database"
    open_exchange_rates_app_id: str | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
