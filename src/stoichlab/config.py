"""Environment-driven settings and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from stoichlab.constants import (
    FALLBACK_MOLAR_MASS,
    FRACTION_TOLERANCE,
    MAX_DENOMINATOR,
    PIVOT_EPSILON,
)

ENV_PREFIX = "STOICHLAB_"


def _env(key: str, default: str = "") -> str:
    v = os.getenv(ENV_PREFIX + key)
    return default if v is None else str(v).strip()


def _env_bool(key: str, default: bool = False) -> bool:
    v = os.getenv(ENV_PREFIX + key)
    if v is None or str(v).strip() == "":
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(key: str, default: int) -> int:
    v = os.getenv(ENV_PREFIX + key)
    if v is None or str(v).strip() == "":
        return default
    try:
        return int(str(v).strip())
    except ValueError:
        return default


def _env_float(key: str, default: float) -> float:
    v = os.getenv(ENV_PREFIX + key)
    if v is None or str(v).strip() == "":
        return default
    try:
        return float(str(v).strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    pivot_epsilon: float = PIVOT_EPSILON
    fraction_tolerance: float = FRACTION_TOLERANCE
    max_denominator: int = MAX_DENOMINATOR
    fallback_molar_mass: float = FALLBACK_MOLAR_MASS
    strict_molar_mass: bool = False


def load_settings() -> Settings:
    """Read settings from ``STOICHLAB_*`` environment variables."""
    return Settings(
        log_level=_env("LOG_LEVEL", "WARNING").upper(),
        pivot_epsilon=_env_float("PIVOT_EPSILON", PIVOT_EPSILON),
        fraction_tolerance=_env_float("FRACTION_TOLERANCE", FRACTION_TOLERANCE),
        max_denominator=max(1, _env_int("MAX_DENOMINATOR", MAX_DENOMINATOR)),
        fallback_molar_mass=_env_float("FALLBACK_MOLAR_MASS", FALLBACK_MOLAR_MASS),
        strict_molar_mass=_env_bool("STRICT_MOLAR_MASS", False),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


def configure_logging(level: str | None = None) -> None:
    level = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
