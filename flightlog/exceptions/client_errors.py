"""Errors caused by the caller's request."""

from typing import Any, ClassVar

from flightlog.exceptions.base import FlightLogError


class ClientError(FlightLogError):
    """Base class for all caller errors."""

    error_code: ClassVar[str] = "CLIENT_ERROR"


class ValidationError(ClientError):
    """Input validation failed.

    Raise when a caller passes a value the logger cannot interpret.
    """

    error_code: ClassVar[str] = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with optional field info.

        Args:
            message: Description of the validation failure.
            field: Name of the field that failed validation.
            value: The invalid value.
            context: Additional context information.
        """
        context_dict = context or {}
        if field is not None:
            context_dict["field"] = field
        if value is not None:
            context_dict["value"] = value
        super().__init__(message, context=context_dict)


class NotFoundError(ClientError):
    """Requested session or artifact not found."""

    error_code: ClassVar[str] = "NOT_FOUND"

    def __init__(
        self,
        message: str,
        *,
        resource_type: str | None = None,
        resource_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not found error with optional resource info.

        Args:
            message: Description of what was not found.
            resource_type: Type of resource (e.g., "session", "events").
            resource_id: ID of the resource that was not found.
            context: Additional context information.
        """
        context_dict = context or {}
        if resource_type is not None:
            context_dict["resource_type"] = resource_type
        if resource_id is not None:
            context_dict["resource_id"] = resource_id
        super().__init__(message, context=context_dict)


class ConflictError(ClientError):
    """Operation conflicts with the current session state."""

    error_code: ClassVar[str] = "CONFLICT"
