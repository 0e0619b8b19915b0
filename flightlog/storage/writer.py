"""Hand-off of closed sessions to the store without blocking the caller."""

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Protocol
from uuid import UUID

from flightlog.events.models import FlightEvent
from flightlog.exceptions.server_errors import StorageError
from flightlog.session.models import FlightSummary
from flightlog.storage.store import SessionStore
from flightlog.telemetry.models import TelemetrySample

logger = logging.getLogger(__name__)


class SessionWriter(Protocol):
    """Anything that accepts a closed session for durable persistence."""

    def save_session(
        self,
        session_id: UUID,
        records: list[TelemetrySample],
        summary: FlightSummary | None = None,
        events: list[FlightEvent] | None = None,
    ) -> object:
        """Accept a closed session's snapshot."""
        ...


class BackgroundSessionWriter:
    """Queues store writes on a single worker thread.

    Session saves and live-event journal writes share the worker, so they run
    one at a time in submission order. The caller gets control back as soon
    as the snapshot is queued. Session save failures surface on the store's
    ``save_error_state``; journal write failures are raised from the returned
    future for the annotator to report. Anything else that escapes the store
    is logged here.
    """

    def __init__(self, store: SessionStore) -> None:
        """Initialize the writer.

        Args:
            store: Store that performs the actual writes.
        """
        self._store = store
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="session-writer")
        self._pending: list[Future[Any]] = []

    def save_session(
        self,
        session_id: UUID,
        records: list[TelemetrySample],
        summary: FlightSummary | None = None,
        events: list[FlightEvent] | None = None,
    ) -> Future[bool]:
        """Queue a closed session for persistence.

        Args:
            session_id: Session identifier.
            records: Immutable snapshot of the session's samples.
            summary: Summary computed at close.
            events: Events recorded for the session.

        Returns:
            Future resolving to the store's result.
        """
        future = self._submit(
            "session save",
            self._store.save_session,
            session_id,
            list(records),
            summary,
            list(events) if events else None,
        )
        logger.debug("Queued session %s for persistence (%d records)", session_id, len(records))
        return future

    def save_live_events(self, events: list[FlightEvent]) -> Future[None]:
        """Queue a write of the annotator's live collection.

        Returns:
            Future that raises StorageError if the journal write fails.
        """
        return self._submit("live events write", self._store.save_live_events, list(events))

    def load_live_events(self) -> list[FlightEvent] | None:
        """Return the journaled live collection, or None if absent."""
        return self._store.load_live_events()

    def load_events(self, session_id: UUID) -> list[FlightEvent] | None:
        """Return the events persisted with a closed session, or None if absent."""
        return self._store.load_events(session_id)

    def flush(self) -> None:
        """Block until every queued write has finished."""
        pending, self._pending = self._pending, []
        wait(pending)

    def close(self) -> None:
        """Finish queued writes and stop the worker thread."""
        self.flush()
        self._executor.shutdown(wait=True)

    def _submit(self, description: str, function: Callable[..., Any], *args: Any) -> Future[Any]:
        future = self._executor.submit(function, *args)
        future.add_done_callback(lambda done: _log_unexpected_failure(description, done))
        self._pending = [pending for pending in self._pending if not pending.done()]
        self._pending.append(future)
        return future


def _log_unexpected_failure(description: str, future: Future[Any]) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None and not isinstance(error, StorageError):
        logger.error("Background %s failed", description, exc_info=error)
