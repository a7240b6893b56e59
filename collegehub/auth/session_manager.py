"""
Session Manager - durable mirror of the current token and user.

The only code path that reads or writes the durable session keys.
"""

from typing import Optional, Protocol

from collegehub.constants import TOKEN_KEY, USER_KEY
from collegehub.domain.session import Session
from collegehub.domain.user import User
from collegehub.utils.logger import get_logger

logger = get_logger(__name__)


class SessionStore(Protocol):
    """Key/value backend (file, DynamoDB or memory)."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> bool: ...

    def remove_item(self, key: str) -> bool: ...


class SessionManager:
    """
    Reads and writes the durable session copy.

    Stores two keys: the bearer token and the JSON-serialized user. The
    durable copy is a cache of SessionContext state, never a second source
    of truth.
    """

    def __init__(self, store: SessionStore):
        """
        Initialize SessionManager.

        Args:
            store: Storage backend implementing get_item/set_item/remove_item
        """
        self.store = store

    def get_token(self) -> Optional[str]:
        return self.store.get_item(TOKEN_KEY) or None

    def get_user(self) -> Optional[User]:
        """
        Retrieve the cached user.

        Returns:
            User, or None if nothing is cached or the cached record is corrupt
        """
        try:
            return Session.deserialize_user(self.store.get_item(USER_KEY))
        except ValueError as e:
            logger.warning(
                "Discarding unreadable cached user",
                operation="get_cached_user",
                error=str(e),
            )
            return None

    def load(self) -> Session:
        """Read both durable keys into a Session."""
        return Session(user=self.get_user(), token=self.get_token())

    def save(self, session: Session) -> None:
        """
        Mirror a full session (token and user) to storage.

        Args:
            session: Session holding both a user and a token
        """
        if session.token:
            self.store.set_item(TOKEN_KEY, session.token)
        self.save_user(session.user)
        logger.info("Session persisted", operation="save_session")

    def save_user(self, user: Optional[User]) -> None:
        """Replace the cached user only; the token key is left untouched."""
        user_json = Session(user=user).serialize_user()
        if user_json is None:
            self.store.remove_item(USER_KEY)
        else:
            self.store.set_item(USER_KEY, user_json)

    def clear(self) -> None:
        """Remove both durable keys."""
        self.store.remove_item(TOKEN_KEY)
        self.store.remove_item(USER_KEY)
        logger.info("Session cleared", operation="clear_session")
