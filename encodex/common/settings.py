# encodex/common/settings.py
from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import BaseModel, Field, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from encodex.common.strings.splitters import csv_to_list


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    prefix: str = "/api"


class FFmpegConfig(BaseModel):
    bin: str = "ffmpeg"
    stream_encoding: str = "utf-8"
    destroy_timeout_sec: float = Field(5.0, gt=0, description="Grace period between terminate() and kill()")

    # CSV of line prefixes that mark encoder self-diagnostics (never failures).
    diagnostic_tags: str = "[libx264"

    # Newer ffmpeg builds: skip Metadata/Chapters blocks inside the input banner,
    # accept Subtitle/Attachment stream lines, read "time=HH:MM:SS.cc" progress
    # and "[out#0/...]"-prefixed summary lines. Off: classic output grammar only.
    modern_output: bool = False

    @field_validator("modern_output", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v)

    @computed_field  # type: ignore[misc]
    @property
    def diagnostic_tag_list(self) -> List[str]:
        return csv_to_list(self.diagnostic_tags)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "encodex"
    app_env: str = "development"  # development|test|production
    log_level: str = "INFO"

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    ffmpeg: FFmpegConfig = FFmpegConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from encodex.common.settings import get_settings
        cfg = get_settings()

    Nested values come from the environment with a double underscore,
    e.g. FFMPEG__BIN=/opt/ffmpeg/bin/ffmpeg or FFMPEG__MODERN_OUTPUT=1.
    """
    return Settings()
