"""
Centralized configuration with environment variable overrides.

Booking policy, reference format, duration bounds and availability
horizons are configurable here. Nothing is hardcoded in the scheduling
or lifecycle logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    return os.getenv(env_var, default).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class StudioConfig:
    """Studio identity settings."""

    name: str = os.getenv("STUDIO_NAME", "Northlight Photography")
    timezone_name: str = os.getenv("STUDIO_TIMEZONE", "Australia/Melbourne")


@dataclass(frozen=True)
class BookingConfig:
    """Booking request policy: references, durations and date rules."""

    reference_prefix: str = os.getenv("BOOKING_REFERENCE_PREFIX", "BK")
    reference_suffix_digits: int = _safe_int("BOOKING_REFERENCE_DIGITS", "4")
    reference_max_attempts: int = _safe_int("BOOKING_REFERENCE_MAX_ATTEMPTS", "10")
    default_duration_hours: float = _safe_float("DEFAULT_DURATION_HOURS", "2.0")
    min_duration_hours: float = _safe_float("MIN_DURATION_HOURS", "0.5")
    max_duration_hours: float = _safe_float("MAX_DURATION_HOURS", "12.0")
    allow_past_dates: bool = _safe_bool("ALLOW_PAST_DATES", "false")


@dataclass(frozen=True)
class AvailabilityConfig:
    """Photographer availability settings."""

    recurring_horizon_weeks: int = _safe_int("RECURRING_HORIZON_WEEKS", "12")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    studio: StudioConfig = field(default_factory=StudioConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    availability: AvailabilityConfig = field(default_factory=AvailabilityConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "studio-booking")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    booking = config.booking
    if not booking.reference_prefix.strip():
        raise ValueError("BOOKING_REFERENCE_PREFIX must not be empty")
    if not 3 <= booking.reference_suffix_digits <= 8:
        raise ValueError(
            "BOOKING_REFERENCE_DIGITS must be between 3 and 8, "
            f"got {booking.reference_suffix_digits}"
        )
    if booking.reference_max_attempts < 1:
        raise ValueError(
            f"BOOKING_REFERENCE_MAX_ATTEMPTS must be >= 1, got {booking.reference_max_attempts}"
        )
    if booking.min_duration_hours <= 0:
        raise ValueError(
            f"MIN_DURATION_HOURS must be > 0, got {booking.min_duration_hours}"
        )
    if booking.max_duration_hours < booking.min_duration_hours:
        raise ValueError(
            "MAX_DURATION_HOURS must be >= MIN_DURATION_HOURS, "
            f"got {booking.max_duration_hours} < {booking.min_duration_hours}"
        )
    if not booking.min_duration_hours <= booking.default_duration_hours <= booking.max_duration_hours:
        raise ValueError(
            "DEFAULT_DURATION_HOURS must lie between MIN_DURATION_HOURS and "
            f"MAX_DURATION_HOURS, got {booking.default_duration_hours}"
        )
    if config.availability.recurring_horizon_weeks < 1:
        raise ValueError(
            "RECURRING_HORIZON_WEEKS must be >= 1, "
            f"got {config.availability.recurring_horizon_weeks}"
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
    logger.info("Configuration loaded for '%s'", config.studio.name)
    return config


# Singleton instance
settings = load_config()
