"""Tagged result of resolving a request's caller."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from apcore import Identity


class AuthKind(enum.Enum):
    """Which authentication path produced the result."""

    API_KEY = "api_key"
    SESSION = "session"
    NONE = "none"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of one authentication decision.

    The ``kind`` is kept for logging and tests only; callers of the API
    never see why a request ended up unauthenticated.

    Attributes:
        kind: The path that produced the identity, or ``AuthKind.NONE``.
        identity: The resolved principal, ``None`` exactly when kind is NONE.
    """

    kind: AuthKind
    identity: Identity | None = None

    def __post_init__(self) -> None:
        if (self.kind is AuthKind.NONE) != (self.identity is None):
            raise ValueError(f"AuthResult kind {self.kind.name} does not match identity {self.identity!r}")

    @property
    def authenticated(self) -> bool:
        return self.identity is not None

    @classmethod
    def api_key(cls, identity: Identity) -> AuthResult:
        return cls(AuthKind.API_KEY, identity)

    @classmethod
    def session(cls, identity: Identity) -> AuthResult:
        return cls(AuthKind.SESSION, identity)


NO_IDENTITY = AuthResult(AuthKind.NONE)
