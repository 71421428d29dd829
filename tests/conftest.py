"""Shared test fixtures for apcore-apiauth tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from apcore import Identity
from starlette.requests import Request

from apcore_apiauth.errors import CsrfValidationError

# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


class FakeKeyStore:
    """KeyStore stub mapping known credentials to identities."""

    def __init__(self, keys: dict[str, Identity] | None = None):
        self.keys = dict(keys or {})
        self.calls: list[str] = []

    def authenticate(self, credential: str) -> Identity | None:
        self.calls.append(credential)
        return self.keys.get(credential)


class FakeSession:
    """Session stub that is logged in when constructed with an identity."""

    def __init__(self, identity: Identity | None = None):
        self.identity = identity

    def is_logged_in(self) -> bool:
        return self.identity is not None

    def get_logged_in_identity(self) -> Identity:
        assert self.identity is not None
        return self.identity


class FakeCsrf:
    """CsrfVerifier stub accepting one token for one namespace."""

    def __init__(self, token: str = "csrf-token", namespace: str = "api"):
        self.token = token
        self.namespace = namespace
        self.calls: list[tuple[str, str]] = []

    def verify(self, token: str, namespace: str) -> None:
        self.calls.append((token, namespace))
        if namespace != self.namespace or token != self.token:
            raise CsrfValidationError(namespace, "token mismatch")


class FakeEnvironment:
    def __init__(self, testing: bool = False):
        self.testing = testing

    def is_testing(self) -> bool:
        return self.testing


class FakeUserStore:
    def __init__(self, users: dict[str, Identity] | None = None):
        self.users = dict(users or {})

    def find(self, user_id: str) -> Identity | None:
        return self.users.get(user_id)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def api_identity() -> Identity:
    return Identity(id="key-owner", type="api_key")


@pytest.fixture
def user_identity() -> Identity:
    return Identity(id="user-1", type="user", roles=("editor",))


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Build a real Starlette Request from method, headers, cookies and query string."""

    def _make(
        method: str = "GET",
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
        query_string: str = "",
        path: str = "/api/items",
        session: dict[str, Any] | None = None,
    ) -> Request:
        raw_headers = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
        if cookies:
            cookie_header = "; ".join(f"{k}={v}" for k, v in cookies.items())
            raw_headers.append((b"cookie", cookie_header.encode("latin-1")))
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "headers": raw_headers,
            "query_string": query_string.encode("latin-1"),
        }
        if session is not None:
            scope["session"] = session
        return Request(scope)

    return _make
