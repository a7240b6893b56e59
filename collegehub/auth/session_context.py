"""
Session Context - owner of the current user and bearer token.

Holds the one session visible to the whole client, verifies a persisted
session on startup, and exposes the mutating operations (login, signup,
social login, logout, user/profile updates). Every change is mirrored to
durable storage through SessionManager.

Lifecycle:
    UNKNOWN --initialize()--> VERIFYING --profile ok--> AUTHENTICATED
                                        --profile fails--> UNAUTHENTICATED
    UNKNOWN --initialize(), nothing stored--> UNAUTHENTICATED
    any --login/signup/social_login ok--> AUTHENTICATED
    any --logout()--> UNAUTHENTICATED
"""

from enum import Enum
from typing import Any, Dict, Optional

from collegehub.api.client import APIError, INVALID_RESPONSE_MESSAGE
from collegehub.api.resources import CollegeHubAPI
from collegehub.database.exceptions import StorageException
from collegehub.domain.session import Session
from collegehub.domain.user import User
from collegehub.utils.logger import get_logger, mask_email, mask_token
from .session_manager import SessionManager

logger = get_logger(__name__)


class SessionState(str, Enum):
    UNKNOWN = "unknown"
    VERIFYING = "verifying"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class SessionContext:
    """
    Single owner of the current session.

    The boolean-returning operations never raise for API failures, and
    login/signup/social_login also absorb storage failures after undoing any
    partial write. The message of the most recent failure is kept in
    `last_error` for callers that want to show why.
    """

    def __init__(self, api: CollegeHubAPI, session_manager: SessionManager):
        """
        Initialize the context and wire it in as the API token provider.

        Args:
            api: Resource API bundle
            session_manager: Durable session mirror
        """
        self.api = api
        self.session_manager = session_manager
        self.session = Session.empty()
        self.state = SessionState.UNKNOWN
        self.is_loading = True
        self.last_error: Optional[str] = None
        self._pending_token: Optional[str] = None

        api.client.set_token_provider(self.get_token)

    @property
    def user(self) -> Optional[User]:
        return self.session.user

    @property
    def token(self) -> Optional[str]:
        return self.session.token

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    def get_token(self) -> Optional[str]:
        """Token for outgoing requests, including the one being verified at startup."""
        return self.session.token or self._pending_token

    def initialize(self) -> SessionState:
        """
        Restore and verify the persisted session.

        A stored token is only trusted after /api/auth/me accepts it. Any
        failure resets the session quietly; it is not reported as an error.

        Returns:
            Resulting state (AUTHENTICATED or UNAUTHENTICATED)
        """
        self.is_loading = True
        try:
            stored = self.session_manager.load()
        except StorageException as e:
            logger.error(
                "Could not read stored session",
                operation="initialize_session",
                error=str(e),
            )
            self._reset_unauthenticated(clear_storage=False)
            return self.state

        if not stored.token or stored.user is None:
            # A lone token or lone user cannot be verified; drop the leftover key
            if not stored.is_empty():
                self._clear_storage_quietly()
            self._reset_unauthenticated(clear_storage=False)
            return self.state

        self.state = SessionState.VERIFYING
        self._pending_token = stored.token
        logger.debug(
            "Verifying stored session",
            operation="initialize_session",
            context={"token": mask_token(stored.token)},
        )

        try:
            profile = self.api.auth.get_profile()
            user = self._user_from_payload(profile)
            if user is None:
                raise APIError(INVALID_RESPONSE_MESSAGE)
        except APIError as e:
            logger.info(
                "Stored session rejected; signing out",
                operation="initialize_session",
                context={"error": e.message},
            )
            self._clear_storage_quietly()
            self._reset_unauthenticated(clear_storage=False)
            return self.state

        verified = Session(user=user, token=stored.token)
        try:
            self.session_manager.save_user(user)
        except StorageException as e:
            logger.warning(
                "Could not refresh cached user",
                operation="initialize_session",
                error=str(e),
            )
        self._pending_token = None
        self.session = verified
        self.state = SessionState.AUTHENTICATED
        self.is_loading = False
        logger.info(
            "Stored session verified",
            operation="initialize_session",
            context={"email": mask_email(user.email)},
        )
        return self.state

    def login(self, email: str, password: str) -> bool:
        """
        Sign in with email and password.

        Returns:
            True on success; False on failure with state and storage unchanged
        """
        return self._authenticate(
            "login", email, lambda: self.api.auth.login(email=email, password=password)
        )

    def signup(
        self,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> bool:
        """Create an account and sign in; same contract as login()."""
        return self._authenticate(
            "signup",
            email,
            lambda: self.api.auth.register(
                name=name, email=email, password=password, phone=phone, address=address
            ),
        )

    def social_login(self, email: str, auth_provider: str) -> bool:
        """Sign in with an externally verified identity; same contract as login()."""
        return self._authenticate(
            "social_login",
            email,
            lambda: self.api.auth.google_login(email=email, auth_provider=auth_provider),
        )

    def logout(self) -> None:
        """Clear the session from memory and storage. Safe to call repeatedly."""
        self._reset_unauthenticated(clear_storage=True)
        self.last_error = None
        logger.info("Signed out", operation="logout")

    def update_user(self, user: User) -> None:
        """
        Replace the current user and its durable copy.

        Used after a profile change already succeeded on the server. The
        token, in memory and in storage, is left untouched.
        """
        self.session_manager.save_user(user)
        self.session = Session(user=user, token=self.session.token)

    def update_profile(self, **changes: Any) -> bool:
        """
        Send a profile update and adopt the returned user.

        Args:
            **changes: name, phone, address, current_password, new_password

        Returns:
            True on success; False with `last_error` set otherwise
        """
        try:
            payload = self.api.auth.update_profile(**changes)
        except APIError as e:
            self.last_error = e.message
            return False

        user = self._user_from_payload(payload)
        if user is None:
            self.last_error = INVALID_RESPONSE_MESSAGE
            return False

        self.update_user(user)
        self.last_error = None
        return True

    def _authenticate(self, operation: str, email: str, call) -> bool:
        self.is_loading = True
        try:
            payload = call()
        except APIError as e:
            logger.info(
                "Authentication rejected",
                operation=operation,
                context={"email": mask_email(email), "error": e.message},
            )
            self.last_error = e.message
            self.is_loading = False
            return False

        user = self._user_from_payload(payload)
        token = payload.get("token") if isinstance(payload, dict) else None
        if user is None or not token:
            logger.error(
                "Authentication response missing user or token",
                operation=operation,
                context={"email": mask_email(email)},
            )
            self.last_error = INVALID_RESPONSE_MESSAGE
            self.is_loading = False
            return False

        new_session = Session(user=user, token=token)
        try:
            self.session_manager.save(new_session)
        except StorageException as e:
            logger.error(
                "Could not persist new session",
                operation=operation,
                context={"email": mask_email(email)},
                error=str(e),
            )
            self._restore_storage()
            self.last_error = str(e)
            self.is_loading = False
            return False

        self.is_loading = False
        self._pending_token = None
        self.session = new_session
        self.state = SessionState.AUTHENTICATED
        self.last_error = None
        logger.info(
            "Signed in",
            operation=operation,
            context={"email": mask_email(user.email)},
        )
        return True

    @staticmethod
    def _user_from_payload(payload: Any) -> Optional[User]:
        """Accept either {"user": {...}} or a bare user object."""
        if not isinstance(payload, dict):
            return None
        data: Dict[str, Any] = payload.get("user") if isinstance(payload.get("user"), dict) else payload
        if not data.get("email") and not data.get("id"):
            return None
        return User.from_dict(data)

    def _restore_storage(self) -> None:
        """Put the durable keys back to the session still held in memory."""
        try:
            if self.session.is_authenticated():
                self.session_manager.save(self.session)
            else:
                self.session_manager.clear()
        except StorageException as e:
            logger.error(
                "Could not restore stored session",
                operation="restore_session",
                error=str(e),
            )

    def _clear_storage_quietly(self) -> None:
        try:
            self.session_manager.clear()
        except StorageException as e:
            logger.error(
                "Could not clear stored session",
                operation="clear_session",
                error=str(e),
            )

    def _reset_unauthenticated(self, clear_storage: bool) -> None:
        self.session = Session.empty()
        self._pending_token = None
        self.state = SessionState.UNAUTHENTICATED
        self.is_loading = False
        if clear_storage:
            self.session_manager.clear()
