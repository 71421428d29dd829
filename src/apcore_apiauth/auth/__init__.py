"""API request authentication: API keys with a CSRF-guarded session fallback."""

from apcore_apiauth.auth.apikey import ApiKeyResolver
from apcore_apiauth.auth.csrf import SessionCsrf, check_csrf, is_safe_method
from apcore_apiauth.auth.extractor import extract_credential
from apcore_apiauth.auth.jwt import ClaimMapping, JWTKeyStore
from apcore_apiauth.auth.keystore import InMemoryKeyStore
from apcore_apiauth.auth.middleware import ApiAuthMiddleware, auth_identity_var, get_identity
from apcore_apiauth.auth.protocol import CsrfVerifier, Environment, IdentityResolver, KeyStore, Session, UserStore
from apcore_apiauth.auth.resolver import ApiAuthResolver
from apcore_apiauth.auth.result import NO_IDENTITY, AuthKind, AuthResult
from apcore_apiauth.auth.session import StarletteSession, current_session_identity

__all__ = [
    # Protocols
    "KeyStore",
    "Session",
    "CsrfVerifier",
    "Environment",
    "UserStore",
    "IdentityResolver",
    # Resolution
    "ApiAuthResolver",
    "ApiKeyResolver",
    "AuthResult",
    "AuthKind",
    "NO_IDENTITY",
    "extract_credential",
    "current_session_identity",
    "check_csrf",
    "is_safe_method",
    # Collaborator adapters
    "InMemoryKeyStore",
    "JWTKeyStore",
    "ClaimMapping",
    "StarletteSession",
    "SessionCsrf",
    # Middleware
    "ApiAuthMiddleware",
    "auth_identity_var",
    "get_identity",
]
