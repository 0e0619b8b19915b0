"""Active-session ownership, bounded sample buffering and summaries.

The aggregator is the single writer of the active session's sample buffer.
All of its mutating methods are expected to run on one coordination context
(the recorder's event loop); nothing here blocks on I/O. Closing a session
hands an immutable snapshot to a ``SessionWriter`` and returns immediately.
"""

import logging
from collections import deque
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from flightlog.config import RestartPolicy
from flightlog.constants import DEFAULT_MAX_RECORDS_IN_MEMORY
from flightlog.events.models import FlightEvent
from flightlog.exceptions.client_errors import ConflictError
from flightlog.export.dump import export_dump
from flightlog.logging.context import set_session_id
from flightlog.session.models import FlightSummary, Session
from flightlog.session.summary import summarize
from flightlog.storage.writer import SessionWriter
from flightlog.telemetry.models import TelemetrySample

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class EventSource(Protocol):
    """Provides the events recorded for a session."""

    def events_for_session(self, session_id: UUID) -> list[FlightEvent]:
        """Return the events belonging to a session."""
        ...


class SessionAggregator:
    """Owns the one active session and its in-memory samples.

    Samples are kept in insertion order in a buffer of bounded size; once the
    bound is reached the oldest sample is evicted for every new one.
    """

    def __init__(
        self,
        writer: SessionWriter,
        events: EventSource | None = None,
        *,
        max_records_in_memory: int = DEFAULT_MAX_RECORDS_IN_MEMORY,
        restart_policy: RestartPolicy = RestartPolicy.REPLACE,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the aggregator.

        Args:
            writer: Receives each closed session for persistence.
            events: Supplies the events to persist with a closed session.
            max_records_in_memory: Buffer bound.
            restart_policy: Whether starting over an active session replaces it
                or is refused.
            clock: Source of session start and end times.
        """
        self._writer = writer
        self._events = events
        self._max_records = max_records_in_memory
        self._restart_policy = restart_policy
        self._clock = clock
        self._session: Session | None = None
        self._buffer: deque[TelemetrySample] = deque(maxlen=max_records_in_memory)

    @property
    def active_session(self) -> Session | None:
        """Return the active session, if any."""
        return self._session

    @property
    def active_session_id(self) -> UUID | None:
        """Return the active session's id, if any."""
        return self._session.id if self._session is not None else None

    @property
    def session_start_time(self) -> datetime | None:
        """Return when the active session started, if any."""
        return self._session.started_at if self._session is not None else None

    @property
    def is_active(self) -> bool:
        """Return whether a session is accepting samples."""
        return self._session is not None

    @property
    def max_records_in_memory(self) -> int:
        """Return the buffer bound."""
        return self._max_records

    @property
    def records(self) -> list[TelemetrySample]:
        """Return a snapshot of the buffer in insertion order."""
        return list(self._buffer)

    def start_session(self) -> UUID:
        """Begin a new session with an empty buffer.

        Under the replace policy an already-active session is dropped without
        being persisted; the caller is expected to have ended it first.

        Returns:
            The new session's id.

        Raises:
            ConflictError: If a session is active and the policy is refuse.
        """
        if self._session is not None:
            if self._restart_policy is RestartPolicy.REFUSE:
                raise ConflictError(
                    "A session is already active",
                    context={"session_id": str(self._session.id)},
                )
            logger.warning(
                "Replacing active session %s; %d buffered samples discarded",
                self._session.id,
                len(self._buffer),
            )

        session = Session(id=uuid4(), started_at=self._clock())
        self._session = session
        self._buffer = deque(maxlen=self._max_records)

        set_session_id(str(session.id))
        logger.info("Started session %s", session.id)
        return session.id

    def end_session(self) -> FlightSummary | None:
        """Close the active session and hand it to the writer.

        Does nothing when no session is active.

        Returns:
            The summary handed over with the session, or None.
        """
        session = self._session
        if session is None:
            return None

        closed = session.closed(self._clock())
        records = self.records_for_session(closed.id)
        summary = summarize(closed.id, records)
        events = self._events.events_for_session(closed.id) if self._events is not None else []

        self._session = None
        set_session_id("")

        self._writer.save_session(closed.id, records, summary, events)
        logger.info(
            "Ended session %s with %d records and %d events",
            closed.id,
            len(records),
            len(events),
        )
        return summary

    def capture(self, sample: TelemetrySample) -> TelemetrySample:
        """Append a sample to the active session.

        A sample tagged for any session other than the active one is treated
        as arriving before a start: a new session is started and the sample is
        re-tagged to it. Under the refuse policy an active session is kept and
        the sample is re-tagged to it instead.

        Args:
            sample: The sample to store.

        Returns:
            The sample as stored, carrying the active session id.
        """
        session = self._session
        if session is None or sample.session_id != session.id:
            if session is not None and self._restart_policy is RestartPolicy.REFUSE:
                target_id = session.id
            else:
                target_id = self.start_session()
            sample = sample.retagged(target_id)

        if len(self._buffer) == self._max_records:
            logger.debug("Sample buffer full (%d), evicting oldest sample", self._max_records)
        self._buffer.append(sample)
        return sample

    def records_for_session(self, session_id: UUID) -> list[TelemetrySample]:
        """Return the buffered samples of a session in insertion order."""
        return [sample for sample in self._buffer if sample.session_id == session_id]

    def buffered_session_ids(self) -> list[UUID]:
        """Return the distinct session ids present in the buffer."""
        return list(dict.fromkeys(sample.session_id for sample in self._buffer))

    def generate_summary(self, session_id: UUID | None = None) -> FlightSummary | None:
        """Compute a summary from buffered samples.

        Args:
            session_id: Session to summarize. Defaults to the active session.

        Returns:
            The summary, or None without a session or without samples.
        """
        target_id = session_id if session_id is not None else self.active_session_id
        if target_id is None:
            return None
        return summarize(target_id, self.records_for_session(target_id))

    def current_session_summary(self) -> FlightSummary | None:
        """Return a fresh summary of the active session, or None if inactive."""
        if self._session is None:
            return None
        return self.generate_summary(self._session.id)

    def export_active_session(self) -> bytes | None:
        """Return a JSON dump of the active session's buffered samples, or None."""
        if self._session is None:
            return None
        return export_dump(self.records_for_session(self._session.id))

    def clear_all(self) -> None:
        """Drop every buffered sample, then end the active session."""
        self._buffer.clear()
        self.end_session()
