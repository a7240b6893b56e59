"""
Session domain model.

The in-memory record of the currently authenticated user and their bearer
token. Durable copies are written by SessionManager under two keys: the
token string and the JSON-serialized user.
"""

import json
from dataclasses import dataclass
from typing import Optional

from collegehub.api.client import normalize_ids

from .user import User


@dataclass
class Session:
    """
    Current user/token pair.

    Attributes:
        user: Authenticated user, or None
        token: Bearer token, or None

    Both fields are set together on login and cleared together on logout;
    `update_user` is the only path that changes one without the other.
    """

    user: Optional[User] = None
    token: Optional[str] = None

    @classmethod
    def empty(cls) -> "Session":
        return cls()

    def is_empty(self) -> bool:
        """True when neither a user nor a token is held."""
        return self.user is None and self.token is None

    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.token)

    def serialize_user(self) -> Optional[str]:
        """
        Serialize the user for durable storage.

        Returns:
            JSON string, or None when no user is held
        """
        if self.user is None:
            return None
        return json.dumps(self.user.to_dict(), ensure_ascii=False)

    @staticmethod
    def deserialize_user(user_json: Optional[str]) -> Optional[User]:
        """
        Parse a stored user record back into a User.

        Raises:
            ValueError: If the stored JSON is malformed or not an object
        """
        if not user_json:
            return None
        try:
            data = json.loads(user_json)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse stored user JSON: {e}")
        if not isinstance(data, dict):
            raise ValueError("Stored user JSON is not an object")
        return User.from_dict(normalize_ids(data))
