"""Entry point helpers — logging setup and a ready-made pipeline."""

from __future__ import annotations

import logging

from meltmix.config import Settings, settings
from meltmix.engine import Pipeline, create_pipeline
from meltmix.engine.config import PipelineConfig


def resolve_log_level(level: str | None = None, config: Settings = settings) -> int:
    """Explicit level, else the configured one, else a default for the environment."""
    name = level or config.meltmix_log_level
    if not name:
        name = "debug" if config.meltmix_env == "development" else "info"
    return getattr(logging, name.upper(), logging.INFO)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=resolve_log_level(level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def create_app(config: PipelineConfig | None = None) -> Pipeline:
    """Configure logging and build a pipeline with every effect registered."""
    configure_logging()
    return create_pipeline(config)
