"""CSRF gate for session-authenticated API requests."""

from __future__ import annotations

import hmac
import logging
import secrets
from collections.abc import MutableMapping
from typing import Any

from apcore_apiauth.auth.protocol import CsrfVerifier, Environment
from apcore_apiauth.constants import CSRF_HEADER, SAFE_METHODS
from apcore_apiauth.errors import CsrfValidationError

logger = logging.getLogger(__name__)


def is_safe_method(method: str) -> bool:
    """Return True for HTTP methods that cannot mutate state."""
    return method.upper() in SAFE_METHODS


def check_csrf(
    request: Any,
    verifier: CsrfVerifier | None,
    namespace: str,
    environment: Environment,
) -> bool:
    """Decide whether a session-authenticated request passes the CSRF check.

    Safe methods always pass. For other methods the ``X-API-CSRF`` header
    must verify against the session token stored for ``namespace``. In
    test mode a missing header is let through, but only for sessions that
    carry a verifier.

    Args:
        request: A Starlette request (needs ``method`` and ``headers``).
        verifier: The session's CSRF verifier, ``None`` if the session has none.
        namespace: The CSRF namespace of this authentication surface.
        environment: Supplies the test-mode switch.

    Returns:
        True if the request may act as the session identity.
    """
    if is_safe_method(request.method):
        return True

    if verifier is None:
        logger.debug("CSRF denied: no CSRF verifier for this session")
        return False

    token = request.headers.get(CSRF_HEADER, "")
    if not token:
        if environment.is_testing():
            logger.debug("CSRF header missing on %s, allowed in test mode", request.method)
            return True
        logger.debug("CSRF denied: %s header missing on %s", CSRF_HEADER, request.method)
        return False

    try:
        verifier.verify(token, namespace)
    except CsrfValidationError as exc:
        logger.debug("CSRF denied: %s", exc.reason)
        return False
    return True


class SessionCsrf:
    """``CsrfVerifier`` keeping one token per namespace inside the session.

    Tokens live under ``data[key][namespace]``.

    Args:
        data: The mutable session mapping (``request.session``).
        key: Session key holding the namespace-to-token dict.
    """

    def __init__(self, data: MutableMapping[str, Any], *, key: str = "csrf") -> None:
        self._data = data
        self._key = key

    @classmethod
    def from_request(cls, request: Any, *, key: str = "csrf") -> SessionCsrf | None:
        if "session" not in request.scope:
            return None
        return cls(request.scope["session"], key=key)

    def generate(self, namespace: str) -> str:
        """Return the session's token for ``namespace``, creating it if needed."""
        tokens = dict(self._data.get(self._key) or {})
        token = tokens.get(namespace)
        if not token:
            token = secrets.token_urlsafe(32)
            tokens[namespace] = token
            # Reassign so cookie-backed sessions notice the change
            self._data[self._key] = tokens
        return token

    def verify(self, token: str, namespace: str) -> None:
        if not token:
            raise CsrfValidationError(namespace, "no token supplied")
        stored = (self._data.get(self._key) or {}).get(namespace)
        if not stored:
            raise CsrfValidationError(namespace, "no token stored in session")
        if not hmac.compare_digest(str(stored).encode("utf-8"), token.encode("utf-8")):
            raise CsrfValidationError(namespace, "token mismatch")


# Verify protocol compliance at import time
assert isinstance(SessionCsrf({}), CsrfVerifier)
