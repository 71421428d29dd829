"""Collaborator protocols consumed by the API authentication layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from apcore import Identity

if TYPE_CHECKING:
    from starlette.requests import HTTPConnection

    from apcore_apiauth.auth.result import AuthResult


@runtime_checkable
class KeyStore(Protocol):
    """Protocol for API-key backends.

    Implementations own every check on the credential (format, expiry,
    revocation) and return an ``Identity`` on success, or ``None``.
    Infrastructure failures should raise rather than return ``None``.
    """

    def authenticate(self, credential: str) -> Identity | None:
        """Look up the principal behind an API credential.

        Args:
            credential: The raw credential string taken from the request.

        Returns:
            An ``Identity`` if the credential is valid, ``None`` otherwise.
        """
        ...


@runtime_checkable
class Session(Protocol):
    """Protocol for an interactive login session attached to a request."""

    def is_logged_in(self) -> bool: ...

    def get_logged_in_identity(self) -> Identity:
        """Return the logged-in principal. Only valid when ``is_logged_in()``."""
        ...


@runtime_checkable
class CsrfVerifier(Protocol):
    """Protocol for per-session anti-forgery token verification."""

    def verify(self, token: str, namespace: str) -> None:
        """Verify ``token`` against the session's token for ``namespace``.

        Raises:
            CsrfValidationError: If the token is missing, unknown or wrong.
        """
        ...


@runtime_checkable
class Environment(Protocol):
    """Protocol for the deployment environment switch."""

    def is_testing(self) -> bool: ...


@runtime_checkable
class UserStore(Protocol):
    """Protocol for looking up interactive users by their session user id."""

    def find(self, user_id: str) -> Identity | None: ...


@runtime_checkable
class IdentityResolver(Protocol):
    """Strategy plugged into ``ApiAuthMiddleware`` to resolve a request's caller."""

    def resolve(self, request: HTTPConnection) -> AuthResult: ...
