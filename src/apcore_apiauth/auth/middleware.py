"""ASGI middleware that attaches the resolved API caller to each request."""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

from apcore import Identity
from starlette.requests import HTTPConnection, Request

from apcore_apiauth.auth.protocol import IdentityResolver
from apcore_apiauth.constants import REQUEST_IDENTITY_ATTR

logger = logging.getLogger(__name__)

# Identity of the request being handled, for code without access to the request
auth_identity_var: ContextVar[Identity | None] = ContextVar("auth_identity", default=None)


def get_identity(request: HTTPConnection) -> Identity | None:
    """Return the identity attached by ``ApiAuthMiddleware``, if any."""
    return getattr(request.state, REQUEST_IDENTITY_ATTR, None)


class ApiAuthMiddleware:
    """ASGI middleware that resolves the caller and attaches it to the request.

    The identity (or ``None``) is stored as ``request.state.user`` and in
    ``auth_identity_var`` for the duration of the downstream call. Requests
    are never rejected here; handlers that need an identity must check.

    Args:
        app: The ASGI application to wrap.
        resolver: The identity-resolution strategy, e.g. ``ApiAuthResolver``.
    """

    def __init__(self, app: Any, resolver: IdentityResolver) -> None:
        self._app = app
        self._resolver = resolver

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self._app(scope, receive, send)
            return

        request = Request(scope)
        result = self._resolver.resolve(request)
        logger.debug("Resolved %s %s as %s", request.method, scope.get("path", ""), result.kind.value)

        scope.setdefault("state", {})[REQUEST_IDENTITY_ATTR] = result.identity

        token = auth_identity_var.set(result.identity)
        try:
            await self._app(scope, receive, send)
        finally:
            auth_identity_var.reset(token)
