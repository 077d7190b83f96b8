"""Client-side auth state owned by an explicit provider scope."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from tools.identity import (
    SIGNED_IN,
    SIGNED_OUT,
    AuthListener,
    AuthenticatedUser,
    IdentityProvider,
    Unsubscribe,
)

LOGGER = logging.getLogger(__name__)


class AuthSessionProvider:
    """Tracks the signed-in user for the lifetime of a ``with`` block.

    On entry the current session is loaded and a single subscription to the
    identity provider is opened. Views register listeners with
    :meth:`subscribe`. On exit the provider subscription and every view
    listener are released.
    """

    def __init__(self, identity: IdentityProvider) -> None:
        self.identity = identity
        self.user: Optional[AuthenticatedUser] = None
        self._listeners: List[AuthListener] = []
        self._unsubscribe: Optional[Unsubscribe] = None

    def __enter__(self) -> "AuthSessionProvider":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._unsubscribe is not None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def open(self) -> None:
        if self.is_open:
            return
        self.user = self.identity.current_user()
        self._unsubscribe = self.identity.on_auth_state_change(self._handle_event)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def require_user(self) -> AuthenticatedUser:
        if self.user is None:
            raise PermissionError("Please sign in to continue")
        return self.user

    def _handle_event(self, event: str, user: Optional[AuthenticatedUser]) -> None:
        if event == SIGNED_IN and user is not None:
            self.user = user
        elif event == SIGNED_OUT:
            self.user = None
        else:
            LOGGER.debug("Ignoring auth event", extra={"auth_event": event})
            return
        for listener in list(self._listeners):
            listener(event, self.user)


__all__ = ["AuthSessionProvider"]
