# SPDX-License-Identifier: MIT

import logging
from typing import Any, Callable, Optional, TypeAlias

import pendulum

from chronicle.model.session import AuthEvent, Session, User
from chronicle.remote.client import RemoteClient, RemoteError, RemoteNotConfiguredError
from chronicle.repository.session import SessionRepository
from chronicle.time import now_utc

logger = logging.getLogger(__name__)

AuthListener: TypeAlias = Callable[[AuthEvent, Optional[Session]], None]


def session_from_response(data: dict[str, Any]) -> Optional[Session]:
    """Build a session from a token response, or None if it carries no token."""
    access_token = data.get("access_token")
    user = data.get("user")
    if not access_token or not user:
        return None

    expires_at: Optional[pendulum.DateTime] = None
    if data.get("expires_at") is not None:
        expires_at = pendulum.from_timestamp(int(data["expires_at"]), tz="UTC")
    elif data.get("expires_in") is not None:
        expires_at = now_utc().add(seconds=int(data["expires_in"]))

    return {
        "user": {"id": str(user["id"]), "email": user.get("email")},
        "access_token": access_token,
        "refresh_token": data.get("refresh_token"),
        "expires_at": expires_at,
    }


class AuthService:
    """
    Account operations against the remote service and the current session.

    The session lives on this object (owned by the application context) and
    is persisted so later command invocations start signed in. Listeners are
    told about SIGNED_IN and SIGNED_OUT transitions.
    """

    def __init__(
        self,
        client: Optional[RemoteClient],
        session_repo: SessionRepository,
        magic_link_redirect: Optional[str] = None,
    ) -> None:
        self._client = client
        self._session_repo = session_repo
        self._magic_link_redirect = magic_link_redirect
        self._session: Optional[Session] = None
        self._listeners: list[AuthListener] = []

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def __require_client(self) -> RemoteClient:
        if self._client is None:
            raise RemoteNotConfiguredError("Remote service not configured")
        return self._client

    def init(self) -> Optional[User]:
        """Restore a persisted session. Returns the signed-in user, if any."""
        if self._client is None:
            logger.info("running in local mode without authentication")
            return None

        session = self._session_repo.load_session()
        if session is None:
            return None

        expires_at = session["expires_at"]
        if expires_at is not None and expires_at <= now_utc():
            session = self.__refresh(session)
            if session is None:
                self.__clear_session()
                self.__emit("SIGNED_OUT", None)
                return None
            self._session_repo.save_session(session)

        self._session = session
        self._client.set_access_token(session["access_token"])
        logger.info("user authenticated: %s", session["user"]["email"])
        return session["user"]

    def __refresh(self, session: Session) -> Optional[Session]:
        if self._client is None or session["refresh_token"] is None:
            return None
        try:
            data = self._client.refresh_session(session["refresh_token"])
        except RemoteError as e:
            logger.warning("session refresh failed: %s", e)
            return None
        return session_from_response(data)

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __emit(self, event: AuthEvent, session: Optional[Session]) -> None:
        for listener in list(self._listeners):
            listener(event, session)

    def __set_session(self, session: Session) -> None:
        self._session = session
        self.__require_client().set_access_token(session["access_token"])
        self._session_repo.save_session(session)
        logger.info("user signed in: %s", session["user"]["email"])
        self.__emit("SIGNED_IN", session)

    def __clear_session(self) -> None:
        self._session = None
        if self._client is not None:
            self._client.set_access_token(None)
        self._session_repo.clear_session()

    def sign_up(self, email: str, password: str) -> dict[str, Any]:
        """
        Create an account. Services that confirm addresses by email return no
        session here; the user signs in after confirming.
        """
        data = self.__require_client().sign_up(email, password)
        session = session_from_response(data)
        if session is not None:
            self.__set_session(session)
        return data

    def sign_in(self, email: str, password: str) -> Session:
        data = self.__require_client().sign_in_with_password(email, password)
        session = session_from_response(data)
        if session is None:
            raise RemoteError("sign-in response did not include a session")
        self.__set_session(session)
        return session

    def sign_in_with_magic_link(self, email: str) -> None:
        self.__require_client().sign_in_with_otp(email, self._magic_link_redirect)

    def verify_magic_link_code(self, email: str, code: str) -> Session:
        """Complete a passwordless sign-in with the one-time code from the email."""
        data = self.__require_client().verify_otp(email, code)
        session = session_from_response(data)
        if session is None:
            raise RemoteError("verification response did not include a session")
        self.__set_session(session)
        return session

    def sign_out(self) -> None:
        client = self.__require_client()
        if self._session is not None:
            try:
                client.sign_out()
            except RemoteError as e:
                # The local session is dropped regardless
                logger.warning("remote sign-out failed: %s", e)
        self.__clear_session()
        logger.info("user signed out")
        self.__emit("SIGNED_OUT", None)

    def get_current_user(self) -> Optional[User]:
        return self._session["user"] if self._session is not None else None

    def is_authenticated(self) -> bool:
        return self._session is not None

    def get_user_id(self) -> Optional[str]:
        return self._session["user"]["id"] if self._session is not None else None
