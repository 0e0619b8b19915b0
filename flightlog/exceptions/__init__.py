"""Flight telemetry logger exception hierarchy.

Architecture:
    FlightLogError (base)
    ├── ClientError
    │   ├── ValidationError
    │   ├── NotFoundError
    │   └── ConflictError
    └── ServerError
        ├── StorageError
        └── ConfigurationError

Failures that must not interrupt a flight (persistence, journal writes) are
caught where they happen and recorded on an ``ErrorState`` instead of being
raised.

Usage:
    from flightlog.exceptions import ConflictError

    def start_session(self) -> UUID:
        if self.is_active and self._policy is RestartPolicy.REFUSE:
            raise ConflictError(
                "A session is already active",
                context={"session_id": str(self.active_session_id)},
            )
        ...
"""

from flightlog.exceptions.base import FlightLogError
from flightlog.exceptions.client_errors import (
    ClientError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from flightlog.exceptions.server_errors import (
    ConfigurationError,
    ServerError,
    StorageError,
)
from flightlog.exceptions.state import ErrorReport, ErrorState

__all__ = [
    "ClientError",
    "ConfigurationError",
    "ConflictError",
    "ErrorReport",
    "ErrorState",
    "FlightLogError",
    "NotFoundError",
    "ServerError",
    "StorageError",
    "ValidationError",
]
