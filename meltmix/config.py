"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    meltmix_env: str = "development"

    # Unset: debug in development, info elsewhere
    meltmix_log_level: str | None = None

    # Seed for the effect RNG when the caller does not inject one
    meltmix_seed: int | None = None

    # Resampling filter for scaled/rotated draws: bilinear, bicubic, nearest
    meltmix_resample: str = "bilinear"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
