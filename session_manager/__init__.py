"""Transaction session management: one-time derivation, cached for the client lifetime."""

from session_manager.manager import SessionManager, create_session, derive_session
from session_manager.models import TransactionSession

__all__ = ["SessionManager", "TransactionSession", "create_session", "derive_session"]
