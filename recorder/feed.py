"""Latest-known drone state, fed by the flight controller or the simulator.

Updates arrive far more often than samples are captured. The feed only keeps
the most recent value of each reading; the capture trigger decides when a
sample is taken from it.
"""

import logging
import math
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from flightlog.telemetry.models import TelemetrySample

logger = logging.getLogger(__name__)

_FULL_CIRCLE_DEGREES = 360.0


class Coordinate(BaseModel):
    """A geographic position in degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class Velocity(BaseModel):
    """Velocity components in meters per second."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @property
    def magnitude(self) -> float:
        """Return the speed as the Euclidean norm of the components."""
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)


class TelemetryUpdate(BaseModel):
    """A partial state report.

    Only the fields set on an update are applied. Setting a field to None
    explicitly clears it, which is how a lost aircraft position is reported.
    ``speed`` takes precedence over ``velocity`` when both are set.
    """

    model_config = ConfigDict(frozen=True)

    battery: int | None = None
    satellites: int | None = None
    altitude: float | None = None
    speed: float | None = None
    velocity: Velocity | None = None
    position: Coordinate | None = None
    heading: float | None = None
    gps_signal_level: int | None = None
    link_signal_level: int | None = None
    home: Coordinate | None = None


class FeedState(BaseModel):
    """Snapshot of every reading currently held by the feed."""

    battery: int | None = Field(default=None, ge=0, le=100)
    satellites: int | None = Field(default=None, ge=0)
    altitude: float | None = None
    speed: float | None = Field(default=None, ge=0)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    heading: float | None = Field(default=None, ge=0, le=360)
    gps_signal_level: int | None = Field(default=None, ge=0, le=5)
    link_signal_level: int | None = Field(default=None, ge=0, le=100)
    home_latitude: float | None = Field(default=None, ge=-90, le=90)
    home_longitude: float | None = Field(default=None, ge=-180, le=180)


def normalize_heading(heading: float) -> float:
    """Map a yaw in -180..180 (or any angle) onto 0..360."""
    return heading % _FULL_CIRCLE_DEGREES


def _in_range(
    value: float | None, low: float = -math.inf, high: float | None = None
) -> bool:
    if value is None:
        return True
    if not math.isfinite(value) or value < low:
        return False
    return high is None or value <= high


def _valid_coordinate(coordinate: Coordinate | None) -> bool:
    if coordinate is None:
        return True
    return _in_range(coordinate.latitude, -90, 90) and _in_range(coordinate.longitude, -180, 180)


class TelemetryFeed:
    """Merges partial updates into the latest-known drone state."""

    def __init__(self) -> None:
        """Initialize an empty feed."""
        self._state = FeedState()
        self._update_count = 0

    @property
    def state(self) -> FeedState:
        """Return a copy of the current readings."""
        return self._state.model_copy()

    @property
    def update_count(self) -> int:
        """Return how many updates were applied since the last reset."""
        return self._update_count

    def apply(self, update: TelemetryUpdate) -> None:
        """Merge an update into the current state.

        Readings outside their valid range are stored as unknown.

        Args:
            update: Partial state report.
        """
        changes: dict[str, object] = {}
        fields = update.model_fields_set

        if "battery" in fields:
            changes["battery"] = update.battery if _in_range(update.battery, 0, 100) else None
        if "satellites" in fields:
            changes["satellites"] = update.satellites if _in_range(update.satellites, 0) else None
        if "altitude" in fields:
            changes["altitude"] = update.altitude if _in_range(update.altitude) else None
        if "speed" in fields:
            changes["speed"] = update.speed if _in_range(update.speed, 0) else None
        elif "velocity" in fields:
            speed = update.velocity.magnitude if update.velocity is not None else None
            changes["speed"] = speed if _in_range(speed, 0) else None
        if "position" in fields:
            position = update.position if _valid_coordinate(update.position) else None
            changes["latitude"] = position.latitude if position else None
            changes["longitude"] = position.longitude if position else None
        if "heading" in fields:
            heading = update.heading
            changes["heading"] = (
                normalize_heading(heading) if heading is not None and _in_range(heading) else None
            )
        if "gps_signal_level" in fields:
            level = update.gps_signal_level
            changes["gps_signal_level"] = level if _in_range(level, 0, 5) else None
        if "link_signal_level" in fields:
            level = update.link_signal_level
            changes["link_signal_level"] = level if _in_range(level, 0, 100) else None
        if "home" in fields:
            home = update.home if _valid_coordinate(update.home) else None
            changes["home_latitude"] = home.latitude if home else None
            changes["home_longitude"] = home.longitude if home else None

        self._state = self._state.model_copy(update=changes)
        self._update_count += 1

    def reset(self) -> None:
        """Forget every reading."""
        self._state = FeedState()
        self._update_count = 0
        logger.debug("Telemetry feed reset")

    def build_sample(self, session_id: UUID, timestamp: datetime) -> TelemetrySample:
        """Build a sample from the latest readings.

        Args:
            session_id: Session the sample is tagged with.
            timestamp: Capture instant.

        Returns:
            A new sample; unknown readings stay None.
        """
        return TelemetrySample(
            session_id=session_id,
            timestamp=timestamp,
            **self._state.model_dump(),
        )
