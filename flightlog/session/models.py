"""Session and flight summary models."""

from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, TypeAdapter

from flightlog.exceptions.client_errors import ConflictError


class Session(BaseModel):
    """A bounded, contiguous logging period.

    A session without ``ended_at`` is active. Closing is one-way.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    started_at: AwareDatetime
    ended_at: AwareDatetime | None = None

    @property
    def is_active(self) -> bool:
        """Return whether the session still accepts samples."""
        return self.ended_at is None

    def closed(self, ended_at: AwareDatetime) -> "Session":
        """Return the closed form of this session.

        Args:
            ended_at: When the session ended.

        Raises:
            ConflictError: If the session is already closed.
        """
        if not self.is_active:
            raise ConflictError(
                f"Session {self.id} is already closed",
                context={"session_id": str(self.id)},
            )
        return self.model_copy(update={"ended_at": ended_at})


class FlightSummary(BaseModel):
    """Derived analytics over a session's samples.

    A cache of values that can always be recomputed from the samples; any
    metric without enough data is ``None``, never zero.
    """

    model_config = ConfigDict(frozen=True)

    session_id: UUID
    start_time: AwareDatetime
    end_time: AwareDatetime | None = None

    max_altitude: float | None = None
    max_speed: float | None = None
    average_speed: float | None = None
    duration_seconds: float = Field(default=0.0)
    total_distance: float | None = None
    battery_start: int | None = None
    battery_end: int | None = None


SUMMARY_ADAPTER: TypeAdapter[FlightSummary] = TypeAdapter(FlightSummary)
