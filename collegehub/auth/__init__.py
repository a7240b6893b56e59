"""Auth module - session context and durable session storage."""

from .session_context import SessionContext, SessionState
from .session_manager import SessionManager

__all__ = ["SessionContext", "SessionState", "SessionManager"]
