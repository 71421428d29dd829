"""Session-based identity fallback."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from apcore import Identity

from apcore_apiauth.auth.protocol import Session, UserStore

logger = logging.getLogger(__name__)


def current_session_identity(session: Session | None) -> Identity | None:
    """Return the identity logged in on ``session``, or ``None``."""
    if session is None or not session.is_logged_in():
        return None
    return session.get_logged_in_identity()


class StarletteSession:
    """``Session`` adapter over Starlette's ``request.session`` dict.

    The session stores only the user id; the identity is loaded through a
    ``UserStore`` so that deleted users stop being logged in.

    Args:
        data: The mutable session mapping (``request.session``).
        user_store: Looks up users by id.
        key: Session key holding the logged-in user id.
    """

    def __init__(self, data: MutableMapping[str, Any], user_store: UserStore, *, key: str = "user_id") -> None:
        self._data = data
        self._user_store = user_store
        self._key = key
        self._identity: Identity | None = None
        self._loaded = False

    @classmethod
    def from_request(cls, request: Any, user_store: UserStore, *, key: str = "user_id") -> StarletteSession | None:
        """Wrap the request's session, or return ``None`` if no session middleware ran."""
        if "session" not in request.scope:
            return None
        return cls(request.scope["session"], user_store, key=key)

    def _load(self) -> Identity | None:
        if not self._loaded:
            user_id = self._data.get(self._key)
            self._identity = self._user_store.find(str(user_id)) if user_id is not None else None
            self._loaded = True
        return self._identity

    def is_logged_in(self) -> bool:
        return self._load() is not None

    def get_logged_in_identity(self) -> Identity:
        identity = self._load()
        if identity is None:
            raise LookupError("Session has no logged-in user")
        return identity

    def login(self, identity: Identity) -> None:
        self._data[self._key] = identity.id
        self._identity = identity
        self._loaded = True

    def logout(self) -> None:
        self._data.pop(self._key, None)
        self._identity = None
        self._loaded = True


# Verify protocol compliance at import time
assert isinstance(StarletteSession.__new__(StarletteSession), Session)
