"""Application configuration using Pydantic BaseSettings.

All settings are loaded from ``FLIGHTLOG_``-prefixed environment variables.

Usage:
    from flightlog.config import get_settings

    settings = get_settings()
    print(settings.logging_frequency.interval_seconds)
    print(settings.sessions_directory)
"""

from enum import StrEnum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    """Valid deployment environments."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LoggingFrequency(StrEnum):
    """Cadence at which live telemetry is captured into the session."""

    HZ_1 = "1 Hz"
    HZ_2 = "2 Hz"
    HZ_5 = "5 Hz"

    @property
    def interval_seconds(self) -> float:
        """Return the capture interval for this cadence."""
        return _FREQUENCY_INTERVALS[self]


_FREQUENCY_INTERVALS: dict[LoggingFrequency, float] = {
    LoggingFrequency.HZ_1: 1.0,
    LoggingFrequency.HZ_2: 0.5,
    LoggingFrequency.HZ_5: 0.2,
}


class RestartPolicy(StrEnum):
    """What ``start_session`` does when a session is already active."""

    REPLACE = "replace"
    REFUSE = "refuse"


class SpeedUnit(StrEnum):
    """Display unit for speeds."""

    METERS_PER_SECOND = "m/s"
    KILOMETERS_PER_HOUR = "km/h"


class AltitudeUnit(StrEnum):
    """Display unit for altitudes."""

    METERS = "m"
    FEET = "ft"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        service_name: Name of this service for logging.
        environment: Deployment environment.
        sessions_directory: Root directory for persisted sessions.
        logging_frequency: Capture cadence for the active session.
        max_records_in_memory: Bound on the active session's sample buffer.
        restart_policy: Behaviour of a start request while a session is active.
        auto_start_session: Start a session when the drone connects.
        auto_end_session: End the session when the drone disconnects.
        event_markers_enabled: Whether operators may add event markers.
        speed_unit: Display unit for speeds.
        altitude_unit: Display unit for altitudes.
        simulator_update_interval_seconds: Push interval of the telemetry simulator.
        log_level: Logging level.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLIGHTLOG_",
        env_file=None,
        case_sensitive=False,
        extra="ignore",
        str_strip_whitespace=True,
    )

    # Service identification
    service_name: str = Field(default="flight-telemetry-logger", min_length=1)
    environment: Environment = Field(default=Environment.DEVELOPMENT)

    # Storage
    sessions_directory: Path = Field(default=Path("sessions"))

    # Session logging
    logging_frequency: LoggingFrequency = Field(default=LoggingFrequency.HZ_2)
    max_records_in_memory: int = Field(default=1000, ge=1, le=100_000)
    restart_policy: RestartPolicy = Field(default=RestartPolicy.REPLACE)
    auto_start_session: bool = Field(default=True)
    auto_end_session: bool = Field(default=True)

    # Event markers
    event_markers_enabled: bool = Field(default=True)

    # Display units
    speed_unit: SpeedUnit = Field(default=SpeedUnit.KILOMETERS_PER_HOUR)
    altitude_unit: AltitudeUnit = Field(default=AltitudeUnit.METERS)

    # Simulator
    simulator_update_interval_seconds: float = Field(default=0.5, ge=0.05, le=10.0)

    # Logging
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed:
            error_message = f"log_level must be one of {allowed}, got '{value}'"
            raise ValueError(error_message)
        return upper_value

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Cached Settings instance.
    """
    return Settings()
