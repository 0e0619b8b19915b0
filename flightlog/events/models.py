"""Flight event marker models."""

from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, TypeAdapter


class EventCategory(StrEnum):
    """Kind of moment an operator flagged during a flight."""

    NOTEWORTHY = "noteworthy"
    ISSUE = "issue"
    ENVIRONMENTAL = "environmental"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        """Return the display label."""
        return _CATEGORY_LABELS[self]

    @property
    def icon(self) -> str:
        """Return the symbol name used by map and list views."""
        return _CATEGORY_ICONS[self]

    @property
    def color(self) -> str:
        """Return the marker colour name."""
        return _CATEGORY_COLORS[self]


_CATEGORY_LABELS: dict[EventCategory, str] = {
    EventCategory.NOTEWORTHY: "Interesting Shot",
    EventCategory.ISSUE: "Problem",
    EventCategory.ENVIRONMENTAL: "Wind",
    EventCategory.CUSTOM: "Custom",
}

_CATEGORY_ICONS: dict[EventCategory, str] = {
    EventCategory.NOTEWORTHY: "camera.fill",
    EventCategory.ISSUE: "exclamationmark.triangle.fill",
    EventCategory.ENVIRONMENTAL: "wind",
    EventCategory.CUSTOM: "tag.fill",
}

_CATEGORY_COLORS: dict[EventCategory, str] = {
    EventCategory.NOTEWORTHY: "blue",
    EventCategory.ISSUE: "red",
    EventCategory.ENVIRONMENTAL: "orange",
    EventCategory.CUSTOM: "purple",
}


class EventPosition(BaseModel):
    """Drone position captured when an event was marked."""

    model_config = ConfigDict(frozen=True)

    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    altitude: float | None = None


class FlightEvent(BaseModel):
    """A discrete, flagged moment within a session."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    session_id: UUID
    timestamp: AwareDatetime
    category: EventCategory
    note: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    altitude: float | None = None

    @property
    def position(self) -> EventPosition | None:
        """Return the captured position, or None if nothing was captured."""
        if self.latitude is None and self.longitude is None and self.altitude is None:
            return None
        return EventPosition(
            latitude=self.latitude,
            longitude=self.longitude,
            altitude=self.altitude,
        )


EVENT_LIST_ADAPTER: TypeAdapter[list[FlightEvent]] = TypeAdapter(list[FlightEvent])
