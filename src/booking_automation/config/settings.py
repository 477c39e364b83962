from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from booking_automation.config.paths import env_file_path, resolve_path

_UNSET = object()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(env_file_path()),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_env: str = "dev"
    log_level: str = "INFO"

    base_url: str = Field(default="https://www.booking.com", alias="BOOKING_BASE_URL")
    headless: bool = Field(default=True, alias="BOOKING_HEADLESS")
    browser_channel: str | None = Field(default=None, alias="BOOKING_BROWSER_CHANNEL")
    default_timeout_ms: int = Field(default=30_000, alias="BOOKING_DEFAULT_TIMEOUT_MS")

    data_file: str = Field(default="data/bookingData.xlsx", alias="BOOKING_DATA_FILE")
    sheet_name: str = Field(default="Sheet1", alias="BOOKING_SHEET_NAME")
    artifacts_dir: str = Field(default="artifacts", alias="BOOKING_ARTIFACTS_DIR")

    navigation_budget: int = Field(default=24, alias="BOOKING_NAVIGATION_BUDGET")
    poll_interval_seconds: float = Field(default=0.25, alias="BOOKING_POLL_INTERVAL")
    window_timeout_seconds: float = Field(default=15.0, alias="BOOKING_WINDOW_TIMEOUT")

    run_e2e: bool = Field(default=False, alias="BOOKING_RUN_E2E")


def require_data_file(value: object = _UNSET) -> Path:
    """
    If `value` is provided (even None), use it. Otherwise fall back to settings.data_file.
    This keeps the check unit-testable without a local spreadsheet.
    """
    raw = settings.data_file if value is _UNSET else value

    if not isinstance(raw, (str, Path)) or not str(raw).strip():
        raise RuntimeError(
            "BOOKING_DATA_FILE is not set. Add it to .env or pass --data on the command line."
        )

    path = resolve_path(raw)
    if not path.exists():
        raise RuntimeError(f"Booking data file not found: {path}")
    return path


settings = Settings()
