from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from habitflow.errors import MalformedInput


class Settings(BaseSettings):
    api_base_url: str = Field("http://localhost:8080/api", alias="HABITFLOW_API_BASE_URL")
    api_token: str | None = Field(None, alias="HABITFLOW_API_TOKEN")

    timezone_name: str = Field("", alias="HABITFLOW_TIMEZONE")

    request_timeout: float = Field(10.0, alias="HABITFLOW_REQUEST_TIMEOUT")
    read_retries: int = Field(2, alias="HABITFLOW_READ_RETRIES")

    log_level: str = Field("INFO", alias="HABITFLOW_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    def observer_zone(self) -> ZoneInfo | None:
        name = (self.timezone_name or "").strip()
        if not name:
            return None
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise MalformedInput(f"Unknown timezone: {name}") from exc


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
