"""Telemetry domain models for flight logging."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, TypeAdapter


class TelemetrySample(BaseModel):
    """One observation of drone state at an instant.

    Every reading is optional: ``None`` means the value was unknown at capture
    time and is never replaced with a numeric default.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    session_id: UUID
    timestamp: AwareDatetime

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

    @property
    def has_coordinates(self) -> bool:
        """Return whether both latitude and longitude are known."""
        return self.latitude is not None and self.longitude is not None

    @property
    def has_home(self) -> bool:
        """Return whether both home coordinates are known."""
        return self.home_latitude is not None and self.home_longitude is not None

    @property
    def has_identifying_value(self) -> bool:
        """Return whether the sample carries a position or battery reading."""
        return self.latitude is not None or self.longitude is not None or self.battery is not None

    def retagged(self, session_id: UUID) -> "TelemetrySample":
        """Return a copy of this sample assigned to another session."""
        return self.model_copy(update={"session_id": session_id})


def sort_by_timestamp(samples: list[TelemetrySample]) -> list[TelemetrySample]:
    """Return samples in chronological order.

    The sort is stable, so samples sharing a timestamp keep their capture order.
    """
    return sorted(samples, key=_timestamp_key)


def _timestamp_key(sample: TelemetrySample) -> datetime:
    return sample.timestamp


SAMPLE_LIST_ADAPTER: TypeAdapter[list[TelemetrySample]] = TypeAdapter(list[TelemetrySample])
