"""Live collection of operator-flagged flight events."""

import logging
from collections.abc import Callable
from concurrent.futures import Future
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from flightlog.events.models import EventCategory, EventPosition, FlightEvent
from flightlog.exceptions.client_errors import ConflictError
from flightlog.exceptions.server_errors import StorageError
from flightlog.exceptions.state import ErrorState

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class EventJournal(Protocol):
    """Durable backing for the annotator's live collection."""

    def save_live_events(self, events: list[FlightEvent]) -> object:
        """Persist the whole live collection.

        Failures raise StorageError, either directly or from the returned
        future when the write is queued.
        """
        ...

    def load_live_events(self) -> list[FlightEvent] | None:
        """Return the persisted live collection, or None if absent."""
        ...

    def load_events(self, session_id: UUID) -> list[FlightEvent] | None:
        """Return the events persisted with a closed session, or None if absent."""
        ...


class EventAnnotator:
    """Records event markers independently of the telemetry cadence.

    The annotator is the only writer of its live collection. Every change is
    written through to the journal; a failed write leaves the in-memory
    collection intact and is reported on ``error_state``.
    """

    def __init__(
        self,
        journal: EventJournal,
        *,
        enabled: bool = True,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the annotator.

        Args:
            journal: Durable backing for the live collection.
            enabled: Whether new markers may be added.
            clock: Source of event timestamps.
        """
        self._journal = journal
        self._enabled = enabled
        self._clock = clock
        self._events: list[FlightEvent] = []
        self.error_state = ErrorState(clock=clock)

    @property
    def events(self) -> list[FlightEvent]:
        """Return a snapshot of the live collection."""
        return list(self._events)

    @property
    def enabled(self) -> bool:
        """Return whether new markers may be added."""
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    def add_event(
        self,
        session_id: UUID,
        category: EventCategory,
        note: str | None = None,
        position: EventPosition | None = None,
    ) -> FlightEvent:
        """Mark a moment in a session.

        Args:
            session_id: Session the event belongs to.
            category: Kind of event.
            note: Optional free-text note.
            position: Drone position at marking time, if known.

        Returns:
            The created event.

        Raises:
            ConflictError: If event markers are disabled.
        """
        if not self._enabled:
            raise ConflictError(
                "Event markers are disabled",
                context={"session_id": str(session_id)},
            )

        event = FlightEvent(
            session_id=session_id,
            timestamp=self._clock(),
            category=category,
            note=note,
            latitude=position.latitude if position else None,
            longitude=position.longitude if position else None,
            altitude=position.altitude if position else None,
        )
        self._events.append(event)
        self._persist()

        logger.info("Added %s event", category.label, extra={"event_id": str(event.id)})
        return event

    def events_for_session(self, session_id: UUID) -> list[FlightEvent]:
        """Return the live events belonging to a session."""
        return [event for event in self._events if event.session_id == session_id]

    def remove_event(self, event: FlightEvent) -> None:
        """Remove one event from the live collection."""
        self._events = [existing for existing in self._events if existing.id != event.id]
        self._persist()

    def clear_session(self, session_id: UUID) -> None:
        """Remove every live event belonging to a session."""
        self._events = [event for event in self._events if event.session_id != session_id]
        self._persist()

    def load_events_for_session(self, session_id: UUID) -> int:
        """Merge a closed session's persisted events into the live collection.

        Events whose id is already present are skipped, so repeated calls
        never duplicate.

        Returns:
            Number of events added.
        """
        persisted = self._journal.load_events(session_id)
        if persisted is None:
            return 0

        known_ids = {event.id for event in self._events}
        added = [event for event in persisted if event.id not in known_ids]
        if added:
            self._events.extend(added)
            self._persist()

        logger.debug(
            "Merged %d of %d persisted events for session %s",
            len(added),
            len(persisted),
            session_id,
        )
        return len(added)

    def restore(self) -> None:
        """Replace the live collection with the journal's last saved copy."""
        restored = self._journal.load_live_events()
        if restored is None:
            return
        self._events = restored
        logger.info("Restored %d live events", len(restored))

    def _persist(self) -> None:
        """Write the live collection through to the journal.

        A journal that queues the write returns a future; its outcome is
        reported when the write completes.
        """
        try:
            outcome = self._journal.save_live_events(list(self._events))
        except StorageError as error:
            self._report_persist_failure(error)
            return

        if isinstance(outcome, Future):
            outcome.add_done_callback(self._on_persisted)
        else:
            self.error_state.clear()

    def _on_persisted(self, future: Future[None]) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is None:
            self.error_state.clear()
        elif isinstance(error, StorageError):
            self._report_persist_failure(error)

    def _report_persist_failure(self, error: StorageError) -> None:
        self.error_state.record(error)
        logger.error(
            "Failed to persist live events: %s",
            error.message,
            extra={"error": error.to_log_dict()},
        )
