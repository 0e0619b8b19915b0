"""Errors raised by the logger's own machinery."""

from typing import Any, ClassVar

from flightlog.exceptions.base import FlightLogError


class ServerError(FlightLogError):
    """Base class for all internal errors."""

    error_code: ClassVar[str] = "SERVER_ERROR"


class StorageError(ServerError):
    """Durable write, read or delete of a session artifact failed."""

    error_code: ClassVar[str] = "STORAGE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        artifact: str | None = None,
        session_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error.

        Args:
            message: Description of the failure.
            artifact: Artifact that failed (e.g., "records", "summary", "events").
            session_id: Session the artifact belongs to.
            context: Additional context information.
        """
        context_dict = context or {}
        if artifact is not None:
            context_dict["artifact"] = artifact
        if session_id is not None:
            context_dict["session_id"] = session_id
        super().__init__(message, context=context_dict)


class ConfigurationError(ServerError):
    """Configuration is invalid or missing."""

    error_code: ClassVar[str] = "CONFIGURATION_ERROR"
