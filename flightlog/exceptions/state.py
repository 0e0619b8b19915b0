"""Observable last-error state for failures that are reported, not raised."""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from flightlog.exceptions.base import FlightLogError


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ErrorReport(BaseModel):
    """A single reported failure."""

    model_config = ConfigDict(frozen=True)

    error_code: str
    message: str
    context: dict[str, Any] = {}
    occurred_at: datetime


class ErrorState:
    """Holds the most recent reported failure for a component.

    Persistence failures must never interrupt the in-memory session, so the
    components that hit them record the error here and carry on. The calling
    layer polls ``last_error`` and ``last_error_time`` to display it.

    The report is replaced as a whole, so a reader on another thread never
    sees a message paired with the wrong time.
    """

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        """Initialize an empty error state.

        Args:
            clock: Source of the time stamped on each report.
        """
        self._clock = clock
        self._report: ErrorReport | None = None

    @property
    def report(self) -> ErrorReport | None:
        """Return the most recent report, if any."""
        return self._report

    @property
    def last_error(self) -> str | None:
        """Return the most recent error message, if any."""
        report = self._report
        return report.message if report is not None else None

    @property
    def last_error_time(self) -> datetime | None:
        """Return when the most recent error occurred, if any."""
        report = self._report
        return report.occurred_at if report is not None else None

    @property
    def has_error(self) -> bool:
        """Return whether an error is currently reported."""
        return self._report is not None

    def record(self, error: FlightLogError | str) -> ErrorReport:
        """Record a failure as the current error.

        Args:
            error: The failure, or a plain message from an outside layer.

        Returns:
            The stored report.
        """
        if not isinstance(error, FlightLogError):
            error = FlightLogError(error)
        report = ErrorReport(**error.to_dict(), occurred_at=self._clock())
        self._report = report
        return report

    def clear(self) -> None:
        """Forget the current error."""
        self._report = None
