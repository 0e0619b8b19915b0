"""Connection lifecycle and rate-limited capture for one drone."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from flightlog.config import LoggingFrequency, Settings
from flightlog.constants import PLACEHOLDER
from flightlog.events.annotator import EventAnnotator
from flightlog.events.models import EventCategory, EventPosition, FlightEvent
from flightlog.exceptions.client_errors import ConflictError
from flightlog.exceptions.state import ErrorState
from flightlog.session.aggregator import SessionAggregator
from flightlog.session.models import FlightSummary
from flightlog.telemetry.formatting import format_summary
from flightlog.telemetry.models import TelemetrySample
from recorder.feed import TelemetryFeed, TelemetryUpdate
from recorder.trigger import CaptureTrigger

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class FlightRecorder:
    """Drives the aggregator from the drone's connection and the capture cadence.

    Telemetry updates only refresh the feed. Samples are taken from the feed
    by the capture trigger, so the number of samples in a session depends on
    the logging frequency and never on how often the drone reports.
    """

    def __init__(
        self,
        settings: Settings,
        aggregator: SessionAggregator,
        annotator: EventAnnotator,
        feed: TelemetryFeed | None = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the recorder.

        Args:
            settings: Session and cadence settings.
            aggregator: Owner of the active session.
            annotator: Receives event markers.
            feed: Latest-known drone state. A new feed is created if omitted.
            clock: Source of sample timestamps.
        """
        self._aggregator = aggregator
        self._annotator = annotator
        self._feed = feed if feed is not None else TelemetryFeed()
        self._clock = clock
        self._auto_start_session = settings.auto_start_session
        self._auto_end_session = settings.auto_end_session
        self._logging_frequency = settings.logging_frequency
        self._speed_unit = settings.speed_unit
        self._altitude_unit = settings.altitude_unit
        self._trigger = CaptureTrigger(self.capture_tick)
        self._connected = False
        self._model_name = PLACEHOLDER
        self.error_state = ErrorState(clock=clock)

    @property
    def connected(self) -> bool:
        """Return whether a drone is connected."""
        return self._connected

    @property
    def model_name(self) -> str:
        """Return the connected drone's model name, or the placeholder."""
        return self._model_name

    @property
    def logging_frequency(self) -> LoggingFrequency:
        """Return the current capture cadence."""
        return self._logging_frequency

    @property
    def feed(self) -> TelemetryFeed:
        """Return the live telemetry feed."""
        return self._feed

    @property
    def trigger(self) -> CaptureTrigger:
        """Return the capture trigger."""
        return self._trigger

    def handle_connected(self, model_name: str) -> None:
        """React to a drone connecting.

        Starts a session unless one is already active or auto-start is off,
        then starts capturing at the configured cadence. Must be called from
        within a running event loop.

        Args:
            model_name: Connected drone's model name.
        """
        self._connected = True
        self._model_name = model_name or PLACEHOLDER
        logger.info("Drone connected: %s", self._model_name)

        if self._auto_start_session and not self._aggregator.is_active:
            self._aggregator.start_session()

        self._trigger.start(self._logging_frequency.interval_seconds)

    def handle_disconnected(self) -> None:
        """React to the drone disconnecting.

        Stops capturing, forgets every reading and ends the session when
        auto-end is on.
        """
        self._connected = False
        self._model_name = PLACEHOLDER
        self._trigger.stop()
        self._feed.reset()
        logger.info("Drone disconnected")

        if self._auto_end_session:
            self.end_session()

    def apply_update(self, update: TelemetryUpdate) -> None:
        """Refresh the feed with a telemetry update."""
        self._feed.apply(update)

    def capture_tick(self) -> TelemetrySample | None:
        """Capture one sample of the latest readings into the active session.

        Returns:
            The stored sample, or None when no session is active.
        """
        session_id = self._aggregator.active_session_id
        if session_id is None:
            return None
        sample = self._feed.build_sample(session_id, self._clock())
        return self._aggregator.capture(sample)

    def set_logging_frequency(self, frequency: LoggingFrequency) -> None:
        """Change the capture cadence.

        The trigger is restarted at the new cadence only while connected.
        """
        self._logging_frequency = frequency
        logger.info("Logging frequency set to %s", frequency.value)
        if self._connected:
            self._trigger.start(frequency.interval_seconds)

    def start_session(self) -> UUID:
        """Start a session manually.

        Raises:
            ConflictError: If a session is active and restarts are refused.
        """
        return self._aggregator.start_session()

    def end_session(self) -> FlightSummary | None:
        """End the active session and log its summary in the display units.

        Returns:
            The closed session's summary, or None when no session was active
            or it has no samples.
        """
        summary = self._aggregator.end_session()
        if summary is not None:
            formatted = format_summary(
                summary, speed_unit=self._speed_unit, altitude_unit=self._altitude_unit
            )
            logger.info(
                "Flight summary: duration %s, distance %s, max altitude %s, "
                "max speed %s, average speed %s, battery %s",
                formatted["duration"],
                formatted["total_distance"],
                formatted["max_altitude"],
                formatted["max_speed"],
                formatted["average_speed"],
                formatted["battery_range"],
            )
        return summary

    def mark_event(self, category: EventCategory, note: str | None = None) -> FlightEvent:
        """Flag the current moment of the active session.

        The drone's current position, if known, is stored with the event.

        Raises:
            ConflictError: If no session is active or markers are disabled.
        """
        session_id = self._aggregator.active_session_id
        if session_id is None:
            raise ConflictError("No active session to mark")

        state = self._feed.state
        position = None
        if state.latitude is not None and state.longitude is not None:
            position = EventPosition(
                latitude=state.latitude,
                longitude=state.longitude,
                altitude=state.altitude,
            )
        return self._annotator.add_event(session_id, category, note=note, position=position)

    def report_error(self, message: str) -> None:
        """Record a failure reported by the drone link or another outside layer."""
        self.error_state.record(message)
        logger.error("Reported error: %s", message)

    def shutdown(self) -> None:
        """Stop capturing and end any active session."""
        self._trigger.stop()
        self.end_session()
