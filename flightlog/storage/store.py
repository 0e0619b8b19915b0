"""Durable persistence of closed flight sessions.

Layout on disk::

    <root>/
        live-events.json                     annotator journal
        <session_id>/
            .created                         ISO 8601 time of the first save
            <session_id>.json                sample list
            <session_id>.summary.json        flight summary
            <session_id>.events.json         event list (omitted when empty)

Each artifact is written independently. A failed write is recorded on
``save_error_state`` and does not stop the remaining artifacts, so a session
may be only partly persisted; every loader tolerates that.
"""

import logging
import shutil
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import TypeVar
from uuid import UUID

from pydantic import TypeAdapter

from flightlog.constants import (
    ARTIFACT_EVENTS,
    ARTIFACT_RECORDS,
    ARTIFACT_SUMMARY,
    CREATED_STAMP_FILENAME,
    EVENTS_ARTIFACT_SUFFIX,
    LIVE_EVENTS_FILENAME,
    RECORDS_ARTIFACT_SUFFIX,
    SUMMARY_ARTIFACT_SUFFIX,
)
from flightlog.events.models import EVENT_LIST_ADAPTER, FlightEvent
from flightlog.exceptions.client_errors import NotFoundError
from flightlog.exceptions.server_errors import StorageError
from flightlog.exceptions.state import ErrorState
from flightlog.session.models import SUMMARY_ADAPTER, FlightSummary
from flightlog.session.summary import summarize
from flightlog.storage.files import read_optional, write_atomic
from flightlog.telemetry.models import SAMPLE_LIST_ADAPTER, TelemetrySample

logger = logging.getLogger(__name__)

ArtifactT = TypeVar("ArtifactT")

_JSON_INDENT = 2


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SessionStore:
    """File-system repository for closed sessions."""

    def __init__(
        self,
        root: Path,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the session store.

        Args:
            root: Directory holding one sub-directory per session.
            clock: Source of creation stamps and error report times.
        """
        self._root = Path(root)
        self._clock = clock
        self._deletion_listeners: list[Callable[[UUID], None]] = []
        self.save_error_state = ErrorState(clock=clock)
        self.delete_error_state = ErrorState(clock=clock)
        self._ensure_root_exists()

    @property
    def root(self) -> Path:
        """Return the sessions directory."""
        return self._root

    @property
    def last_save_error(self) -> str | None:
        """Return the most recent save failure message, if any."""
        return self.save_error_state.last_error

    @property
    def last_delete_error(self) -> str | None:
        """Return the most recent delete failure message, if any."""
        return self.delete_error_state.last_error

    def add_deletion_listener(self, listener: Callable[[UUID], None]) -> None:
        """Register a callback invoked with the id of each deleted session."""
        self._deletion_listeners.append(listener)

    # Save

    def save_session(
        self,
        session_id: UUID,
        records: list[TelemetrySample],
        summary: FlightSummary | None = None,
        events: list[FlightEvent] | None = None,
    ) -> bool:
        """Persist a closed session's artifacts.

        Args:
            session_id: Session identifier.
            records: Sample list; written even when empty.
            summary: Derived summary; skipped when None.
            events: Event list; skipped when None or empty.

        Returns:
            True if every attempted artifact was written.
        """
        self.save_error_state.clear()
        session_directory = self._session_directory(session_id)
        first_save = not session_directory.is_dir()

        try:
            session_directory.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            self._report_save_failure(
                StorageError(
                    f"Failed to create session directory: {error}",
                    session_id=str(session_id),
                )
            )
            return False

        if first_save:
            self._stamp_creation(session_id)

        succeeded = self._write_artifact(
            session_id,
            ARTIFACT_RECORDS,
            self._artifact_path(session_id, RECORDS_ARTIFACT_SUFFIX),
            SAMPLE_LIST_ADAPTER,
            list(records),
        )
        logger.info("Saved %d records for session %s", len(records), session_id)

        if summary is not None:
            succeeded &= self._write_artifact(
                session_id,
                ARTIFACT_SUMMARY,
                self._artifact_path(session_id, SUMMARY_ARTIFACT_SUFFIX),
                SUMMARY_ADAPTER,
                summary,
            )

        if events:
            succeeded &= self._write_artifact(
                session_id,
                ARTIFACT_EVENTS,
                self._artifact_path(session_id, EVENTS_ARTIFACT_SUFFIX),
                EVENT_LIST_ADAPTER,
                list(events),
            )
            logger.info("Saved %d events for session %s", len(events), session_id)

        return succeeded

    # Load

    def load_all_session_ids(self) -> list[UUID]:
        """Enumerate persisted sessions, newest first by creation time."""
        try:
            entries = list(self._root.iterdir())
        except OSError:
            logger.warning("Cannot list sessions directory %s", self._root)
            return []

        session_ids: list[UUID] = []
        for entry in entries:
            if not entry.is_dir():
                continue
            try:
                session_ids.append(UUID(entry.name))
            except ValueError:
                continue

        def newest_first(session_id: UUID) -> tuple[float, str]:
            created = self.creation_date(session_id)
            return (created.timestamp() if created else float("-inf"), str(session_id))

        return sorted(session_ids, key=newest_first, reverse=True)

    def load_records(self, session_id: UUID) -> list[TelemetrySample] | None:
        """Return a session's sample list, or None if missing or unreadable."""
        return self._read_artifact(
            session_id,
            ARTIFACT_RECORDS,
            self._artifact_path(session_id, RECORDS_ARTIFACT_SUFFIX),
            SAMPLE_LIST_ADAPTER,
        )

    def load_summary(self, session_id: UUID) -> FlightSummary | None:
        """Return a session's persisted summary, or None if missing or unreadable."""
        return self._read_artifact(
            session_id,
            ARTIFACT_SUMMARY,
            self._artifact_path(session_id, SUMMARY_ARTIFACT_SUFFIX),
            SUMMARY_ADAPTER,
        )

    def load_or_derive_summary(self, session_id: UUID) -> FlightSummary | None:
        """Return the persisted summary, recomputing it from the samples if absent."""
        summary = self.load_summary(session_id)
        if summary is not None:
            return summary

        records = self.load_records(session_id)
        if records is None:
            return None
        return summarize(session_id, records)

    def load_events(self, session_id: UUID) -> list[FlightEvent] | None:
        """Return a session's persisted events, or None if missing or unreadable."""
        return self._read_artifact(
            session_id,
            ARTIFACT_EVENTS,
            self._artifact_path(session_id, EVENTS_ARTIFACT_SUFFIX),
            EVENT_LIST_ADAPTER,
        )

    def creation_date(self, session_id: UUID) -> datetime | None:
        """Return when a session was first persisted.

        Reads the stamp written on the first save. Directories without a
        readable stamp fall back to file-system metadata: the birth time where
        the platform records one, otherwise the directory's modification time,
        which moves whenever an artifact is added or replaced.
        """
        stamp_path = self._session_directory(session_id) / CREATED_STAMP_FILENAME
        try:
            stamp = read_optional(stamp_path)
        except OSError as error:
            logger.warning("Cannot read creation stamp for session %s: %s", session_id, error)
            stamp = None
        if stamp is not None:
            try:
                return datetime.fromisoformat(stamp.decode())
            except ValueError:
                logger.warning("Malformed creation stamp for session %s", session_id)

        try:
            status = self._session_directory(session_id).stat()
        except OSError:
            return None
        created = getattr(status, "st_birthtime", None)
        if created is None:
            created = status.st_mtime
        return datetime.fromtimestamp(created, tz=UTC)

    def export_file_path(self, session_id: UUID) -> Path | None:
        """Return the path of a session's sample list if it exists."""
        path = self._artifact_path(session_id, RECORDS_ARTIFACT_SUFFIX)
        return path if path.is_file() else None

    # Delete

    def delete_session(self, session_id: UUID) -> bool:
        """Irreversibly remove every artifact of a session.

        On success the deletion listeners are notified so the annotator can
        drop the session's live events.

        Returns:
            True if the session was deleted.
        """
        self.delete_error_state.clear()
        session_directory = self._session_directory(session_id)

        if not session_directory.is_dir():
            error = NotFoundError(
                "Session directory does not exist",
                resource_type="session",
                resource_id=str(session_id),
            )
            self.delete_error_state.record(error)
            logger.warning("Cannot delete session %s: not found", session_id)
            return False

        try:
            shutil.rmtree(session_directory)
        except OSError as error:
            failure = StorageError(
                f"Failed to delete session: {error}",
                session_id=str(session_id),
            )
            self.delete_error_state.record(failure)
            logger.error(
                "Failed to delete session %s: %s",
                session_id,
                error,
                extra={"error": failure.to_log_dict()},
            )
            return False

        logger.info("Deleted session %s", session_id)
        for listener in self._deletion_listeners:
            listener(session_id)
        return True

    # Live event journal

    def save_live_events(self, events: list[FlightEvent]) -> None:
        """Persist the annotator's live collection.

        Raises:
            StorageError: If the journal cannot be written.
        """
        try:
            self._ensure_root_exists()
            write_atomic(
                self._root / LIVE_EVENTS_FILENAME,
                EVENT_LIST_ADAPTER.dump_json(events, indent=_JSON_INDENT),
            )
        except (OSError, ValueError) as error:
            raise StorageError(
                f"Failed to save live events: {error}",
                artifact=ARTIFACT_EVENTS,
            ) from error

    def load_live_events(self) -> list[FlightEvent] | None:
        """Return the annotator's journaled live collection, or None if absent."""
        path = self._root / LIVE_EVENTS_FILENAME
        try:
            data = read_optional(path)
            if data is None:
                return None
            return EVENT_LIST_ADAPTER.validate_json(data)
        except (OSError, ValueError) as error:
            logger.warning("Unreadable live events journal %s: %s", path, error)
            return None

    # Internals

    def _ensure_root_exists(self) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            self._report_save_failure(
                StorageError(f"Failed to create sessions directory: {error}")
            )

    def _stamp_creation(self, session_id: UUID) -> None:
        path = self._session_directory(session_id) / CREATED_STAMP_FILENAME
        try:
            write_atomic(path, self._clock().isoformat().encode())
        except OSError as error:
            logger.warning("Cannot stamp creation time for session %s: %s", session_id, error)

    def _session_directory(self, session_id: UUID) -> Path:
        return self._root / str(session_id)

    def _artifact_path(self, session_id: UUID, suffix: str) -> Path:
        return self._session_directory(session_id) / f"{session_id}{suffix}"

    def _write_artifact(
        self,
        session_id: UUID,
        artifact: str,
        path: Path,
        adapter: TypeAdapter[ArtifactT],
        value: ArtifactT,
    ) -> bool:
        try:
            data = adapter.dump_json(value, indent=_JSON_INDENT)
        except ValueError as error:
            self._report_save_failure(
                StorageError(
                    f"Failed to encode {artifact}: {error}",
                    artifact=artifact,
                    session_id=str(session_id),
                )
            )
            return False

        try:
            write_atomic(path, data)
        except OSError as error:
            self._report_save_failure(
                StorageError(
                    f"Failed to save {artifact}: {error}",
                    artifact=artifact,
                    session_id=str(session_id),
                )
            )
            return False

        logger.debug("Wrote %s artifact to %s", artifact, path.name)
        return True

    def _read_artifact(
        self,
        session_id: UUID,
        artifact: str,
        path: Path,
        adapter: TypeAdapter[ArtifactT],
    ) -> ArtifactT | None:
        try:
            data = read_optional(path)
        except OSError as error:
            logger.warning("Cannot read %s for session %s: %s", artifact, session_id, error)
            return None
        if data is None:
            return None

        try:
            return adapter.validate_json(data)
        except ValueError as error:
            logger.warning("Malformed %s for session %s: %s", artifact, session_id, error)
            return None

    def _report_save_failure(self, error: StorageError) -> None:
        self.save_error_state.record(error)
        logger.error("%s", error.message, extra={"error": error.to_log_dict()})
