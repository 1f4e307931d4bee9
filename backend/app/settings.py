from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECORDER_", extra="ignore")

    # Paths
    work_dir: str = "var/jobs"

    # Auth
    # Empty key rejects every authenticated request.
    access_key: str = Field(default="")

    # Jobs
    download_command: str = "youtube-dl"
    record_extra_args: tuple[str, ...] = ("--write-all-thumbnails", "--write-info-json")

    # Child reaper
    reaper_poll_interval_seconds: float = 5.0

    def ensure_dirs(self) -> None:
        Path(self.work_dir).mkdir(parents=True, exist_ok=True)


SETTINGS = Settings()
