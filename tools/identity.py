"""Identity providers: bearer verification, magic links and auth events."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from supabase import AuthApiError, Client

from fitroom_app.errors import AuthenticationError

LOGGER = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

AuthListener = Callable[[str, Optional["AuthenticatedUser"]], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    email: Optional[str] = None


def bearer_token(authorization: Optional[str]) -> str:
    """Strip the ``Bearer`` prefix from an Authorization header value."""

    if not authorization:
        raise AuthenticationError("No authorization header")
    scheme, _, credential = authorization.strip().partition(" ")
    token = credential.strip() if scheme.lower() == "bearer" else scheme
    if not token:
        raise AuthenticationError("No authorization header")
    return token


class IdentityProvider(ABC):
    """Abstract session/identity provider."""

    @abstractmethod
    def verify_token(self, token: str) -> AuthenticatedUser:
        """Return the user a bearer token belongs to or raise ``AuthenticationError``."""

    @abstractmethod
    def send_magic_link(self, email: str, redirect_to: Optional[str] = None) -> None:
        """Email a one-time sign-in link."""

    @abstractmethod
    def current_user(self) -> Optional[AuthenticatedUser]:
        """Return the user of the active client session, if any."""

    @abstractmethod
    def on_auth_state_change(self, listener: AuthListener) -> Unsubscribe:
        """Register a listener; the returned callable removes it."""

    def resolve_bearer(self, authorization: Optional[str]) -> AuthenticatedUser:
        return self.verify_token(bearer_token(authorization))


class SupabaseIdentityProvider(IdentityProvider):
    """Identity backed by Supabase auth."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def verify_token(self, token: str) -> AuthenticatedUser:
        try:
            response = self.client.auth.get_user(token)
        except AuthApiError as exc:
            LOGGER.warning("Bearer token rejected", extra={"error": exc.message})
            raise AuthenticationError("Invalid user") from exc
        user = response.user if response else None
        if user is None:
            raise AuthenticationError("Invalid user")
        return AuthenticatedUser(id=str(user.id), email=user.email)

    def send_magic_link(self, email: str, redirect_to: Optional[str] = None) -> None:
        credentials: Dict[str, object] = {"email": email}
        if redirect_to:
            credentials["options"] = {"email_redirect_to": redirect_to}
        self.client.auth.sign_in_with_otp(credentials)

    def current_user(self) -> Optional[AuthenticatedUser]:
        session = self.client.auth.get_session()
        if session and session.user:
            return AuthenticatedUser(id=str(session.user.id), email=session.user.email)
        return None

    def on_auth_state_change(self, listener: AuthListener) -> Unsubscribe:
        def _callback(event, session) -> None:
            user = None
            if session is not None and session.user is not None:
                user = AuthenticatedUser(id=str(session.user.id), email=session.user.email)
            listener(str(getattr(event, "value", event)), user)

        subscription = self.client.auth.on_auth_state_change(_callback)
        return subscription.unsubscribe


class MockIdentityProvider(IdentityProvider):
    """Offline provider with a fixed token table, for local runs and tests."""

    def __init__(self, tokens: Optional[Dict[str, AuthenticatedUser]] = None) -> None:
        self.tokens = dict(tokens or {})
        self.magic_links: List[Dict[str, Optional[str]]] = []
        self._user: Optional[AuthenticatedUser] = None
        self._listeners: List[AuthListener] = []

    def verify_token(self, token: str) -> AuthenticatedUser:
        user = self.tokens.get(token)
        if user is None:
            raise AuthenticationError("Invalid user")
        return user

    def send_magic_link(self, email: str, redirect_to: Optional[str] = None) -> None:
        LOGGER.info("Recording mock magic link", extra={"email": email})
        self.magic_links.append({"email": email, "redirect_to": redirect_to})

    def current_user(self) -> Optional[AuthenticatedUser]:
        return self._user

    def on_auth_state_change(self, listener: AuthListener) -> Unsubscribe:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def sign_in(self, user: AuthenticatedUser) -> None:
        self._user = user
        for listener in list(self._listeners):
            listener(SIGNED_IN, user)

    def sign_out(self) -> None:
        self._user = None
        for listener in list(self._listeners):
            listener(SIGNED_OUT, None)


__all__ = [
    "AuthenticatedUser",
    "IdentityProvider",
    "MockIdentityProvider",
    "SIGNED_IN",
    "SIGNED_OUT",
    "SupabaseIdentityProvider",
    "bearer_token",
]
