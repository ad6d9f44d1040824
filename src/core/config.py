"""Engine configuration loaded from the environment.

Every setting has a default matching the published methodology, so the
engine runs without any environment at all. Override with
``CALC_ENGINE_<FIELD>`` variables (e.g. ``CALC_ENGINE_CACHE_DEFAULT_TTL_SECONDS=600``).
"""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Tunables for the calculation engine and its result cache."""

    # ResultCache
    cache_default_ttl_seconds: float = Field(default=3600.0, gt=0)
    cache_shard_count: int = Field(default=16, ge=1, le=1024)

    # BenchmarkAnalyzer
    beta_min_sample_size: int = Field(default=5, ge=2)
    benchmark_max_days: int = Field(default=3650, ge=1)

    # RatioBenchmarks
    retirement_age: int = Field(default=65, ge=1)
    default_profile_age: int = Field(default=40, ge=0)
    savings_target_ratio: Decimal = Field(default=Decimal("0.12"), ge=0)
    education_target_ratio: Decimal = Field(default=Decimal("1.0"), ge=0)

    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_prefix="CALC_ENGINE_", case_sensitive=False)


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> EngineSettings:
    """Return cached engine settings with optional overrides."""

    if overrides:
        return EngineSettings(**overrides)
    return EngineSettings()
