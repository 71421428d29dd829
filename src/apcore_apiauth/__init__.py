"""apcore-apiauth: API key and CSRF-guarded session authentication for Starlette apps."""

from __future__ import annotations

import logging

from apcore_apiauth.auth import (
    ApiAuthMiddleware,
    ApiAuthResolver,
    AuthKind,
    AuthResult,
    ClaimMapping,
    InMemoryKeyStore,
    JWTKeyStore,
    KeyStore,
    SessionCsrf,
    StarletteSession,
    UserStore,
    auth_identity_var,
    get_identity,
)
from apcore_apiauth.auth.protocol import Environment
from apcore_apiauth.config import AuthEnvironment
from apcore_apiauth.constants import API_CSRF_NAMESPACE, CSRF_HEADER, REQUEST_IDENTITY_ATTR
from apcore_apiauth.errors import ApiAuthError, ConfigurationError, CsrfValidationError

__all__ = [
    # Public API
    "create_resolver",
    "ApiAuthResolver",
    "ApiAuthMiddleware",
    "AuthResult",
    "AuthKind",
    "auth_identity_var",
    "get_identity",
    # Collaborators
    "AuthEnvironment",
    "InMemoryKeyStore",
    "JWTKeyStore",
    "ClaimMapping",
    "StarletteSession",
    "SessionCsrf",
    # Constants
    "API_CSRF_NAMESPACE",
    "CSRF_HEADER",
    "REQUEST_IDENTITY_ATTR",
    # Errors
    "ApiAuthError",
    "ConfigurationError",
    "CsrfValidationError",
]

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def create_resolver(
    key_store: KeyStore,
    user_store: UserStore,
    *,
    environment: Environment | None = None,
    session_key: str = "user_id",
    csrf_key: str = "csrf",
) -> ApiAuthResolver:
    """Build an ``ApiAuthResolver`` backed by Starlette's cookie session.

    Requires ``starlette.middleware.sessions.SessionMiddleware`` to run
    before ``ApiAuthMiddleware`` for the session path to be available.

    Args:
        key_store: Looks up API credentials.
        user_store: Loads session users by id.
        environment: Test-mode switch. Defaults to ``AuthEnvironment.from_env()``.
        session_key: Session key holding the logged-in user id.
        csrf_key: Session key holding the per-namespace CSRF tokens.

    Returns:
        A configured ``ApiAuthResolver``.
    """
    if environment is None:
        environment = AuthEnvironment.from_env()
    logger.debug("Creating API auth resolver (environment=%r)", environment)

    return ApiAuthResolver(
        key_store,
        environment,
        session_factory=lambda request: StarletteSession.from_request(request, user_store, key=session_key),
        csrf_factory=lambda request: SessionCsrf.from_request(request, key=csrf_key),
    )
