"""
Centralized configuration with environment variable overrides.

Business-hours defaults, suggestion limits and the fallback service
duration live here. The scheduling algorithms read them only as
defaults; callers can always pass explicit business hours.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class SchedulingConfig:
    """Slot search window and conflict-check defaults."""

    open_hour: int = _safe_int("SCHEDULING_OPEN_HOUR", "8")
    close_hour: int = _safe_int("SCHEDULING_CLOSE_HOUR", "19")
    slot_increment_minutes: int = _safe_int("SLOT_INCREMENT_MINUTES", "30")
    max_suggestions: int = _safe_int("MAX_SUGGESTED_SLOTS", "5")
    default_duration_minutes: int = _safe_int("DEFAULT_SERVICE_DURATION", "30")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "barbershop-scheduling")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    sched = config.scheduling
    if not 0 <= sched.open_hour <= 23:
        raise ValueError(
            f"SCHEDULING_OPEN_HOUR must be between 0 and 23, got {sched.open_hour}"
        )
    if not 1 <= sched.close_hour <= 24:
        raise ValueError(
            f"SCHEDULING_CLOSE_HOUR must be between 1 and 24, got {sched.close_hour}"
        )
    if sched.open_hour >= sched.close_hour:
        raise ValueError(
            "SCHEDULING_OPEN_HOUR must be before SCHEDULING_CLOSE_HOUR, "
            f"got {sched.open_hour} >= {sched.close_hour}"
        )
    if not 1 <= sched.slot_increment_minutes <= MINUTES_PER_DAY:
        raise ValueError(
            "SLOT_INCREMENT_MINUTES must be between 1 and 1440, "
            f"got {sched.slot_increment_minutes}"
        )
    if sched.max_suggestions < 1:
        raise ValueError(
            f"MAX_SUGGESTED_SLOTS must be >= 1, got {sched.max_suggestions}"
        )
    if sched.default_duration_minutes < 1:
        raise ValueError(
            "DEFAULT_SERVICE_DURATION must be >= 1, "
            f"got {sched.default_duration_minutes}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
