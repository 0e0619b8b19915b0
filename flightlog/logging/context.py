"""Context variables carrying the active flight session into log records.

Uses Python's contextvars so that the simulator task, the capture trigger
and the background writer thread each see the session they were started for.
"""

from contextvars import ContextVar
from typing import Any

session_id: ContextVar[str] = ContextVar("session_id", default="")

_extra_context: ContextVar[dict[str, Any] | None] = ContextVar("extra_context", default=None)


def get_session_id() -> str:
    """Get the session ID bound to the current context.

    Returns:
        The session ID, or an empty string when no session is bound.
    """
    return session_id.get()


def set_session_id(value: str) -> None:
    """Bind a session ID to the current context.

    Args:
        value: The session ID, or an empty string to unbind.
    """
    session_id.set(value)


def get_extra_context() -> dict[str, Any]:
    """Get the current extra context.

    Returns:
        Dictionary of extra context fields.
    """
    context = _extra_context.get()
    if context is None:
        return {}
    return context.copy()


def set_extra_context(**kwargs: Any) -> None:
    """Set additional context fields to include in all log messages.

    Args:
        **kwargs: Key-value pairs to include in log messages.
    """
    current = _extra_context.get()
    current = {} if current is None else current.copy()
    current.update(kwargs)
    _extra_context.set(current)


def clear_context() -> None:
    """Clear all context (session ID and extra context)."""
    session_id.set("")
    _extra_context.set(None)
