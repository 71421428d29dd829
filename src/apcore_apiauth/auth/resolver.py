"""Decide who, if anyone, an API request is acting as."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from apcore import Identity

from apcore_apiauth.auth.apikey import ApiKeyResolver
from apcore_apiauth.auth.csrf import check_csrf, is_safe_method
from apcore_apiauth.auth.extractor import extract_credential
from apcore_apiauth.auth.protocol import CsrfVerifier, Environment, KeyStore, Session
from apcore_apiauth.auth.result import NO_IDENTITY, AuthResult
from apcore_apiauth.auth.session import current_session_identity
from apcore_apiauth.constants import API_CSRF_NAMESPACE

logger = logging.getLogger(__name__)

SessionFactory = Callable[[Any], Session | None]
CsrfFactory = Callable[[Any], CsrfVerifier | None]


def _absent(request: Any) -> None:
    return None


class ApiAuthResolver:
    """Resolves the caller of an API request from an API key or a session.

    The API key path is tried first. If it yields nothing, a logged-in
    session is accepted for safe methods, and for other methods only once
    the CSRF gate passes. Every failure resolves to ``NO_IDENTITY``;
    collaborator exceptions propagate.

    Args:
        key_store: Looks up API credentials.
        environment: Supplies the test-mode switch for the CSRF gate.
        session_factory: Returns the request's ``Session`` or ``None``.
        csrf_factory: Returns the request's ``CsrfVerifier`` or ``None``.
        namespace: CSRF namespace of this authentication surface.
    """

    def __init__(
        self,
        key_store: KeyStore,
        environment: Environment,
        *,
        session_factory: SessionFactory | None = None,
        csrf_factory: CsrfFactory | None = None,
        namespace: str = API_CSRF_NAMESPACE,
    ) -> None:
        self._api_keys = ApiKeyResolver(key_store)
        self._environment = environment
        self._session_factory = session_factory or _absent
        self._csrf_factory = csrf_factory or _absent
        self._namespace = namespace

    def resolve(self, request: Any) -> AuthResult:
        """Run the authentication decision for ``request``."""
        identity = self._api_keys.resolve(extract_credential(request))
        if identity is not None:
            return AuthResult.api_key(identity)

        identity = current_session_identity(self._session_factory(request))
        if identity is None:
            return NO_IDENTITY

        if is_safe_method(request.method):
            return AuthResult.session(identity)

        if check_csrf(request, self._csrf_factory(request), self._namespace, self._environment):
            return AuthResult.session(identity)

        logger.debug("Session identity %s rejected for %s request", identity.id, request.method)
        return NO_IDENTITY

    def authenticate(self, request: Any) -> Identity | None:
        """Return only the resolved identity (``None`` if unauthenticated)."""
        return self.resolve(request).identity
