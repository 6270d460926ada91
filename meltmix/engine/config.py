"""Pipeline configuration — per-instance overrides of the global settings."""

from __future__ import annotations

from dataclasses import dataclass, field

from meltmix.config import settings


@dataclass
class PipelineConfig:
    """Controls randomness and resampling for one pipeline instance."""

    # RNG seed for random effects; None draws fresh entropy per run
    seed: int | None = field(default_factory=lambda: settings.meltmix_seed)

    # Resampling filter used by the drawing surface
    resample: str = field(default_factory=lambda: settings.meltmix_resample)
