"""Candidate API credential extraction from request headers, cookies and query."""

from __future__ import annotations

import logging
import re
from typing import Any

from apcore_apiauth.constants import (
    API_KEY_HEADER,
    API_KEY_QUERY_PARAM,
    AUTHORIZATION_HEADER,
    TOKEN_COOKIE,
)

logger = logging.getLogger(__name__)

_BEARER_RE = re.compile(r"\s*Bearer\s+(.*)$", re.IGNORECASE)


def _bearer_token(authorization: str) -> str | None:
    match = _BEARER_RE.match(authorization)
    if match is None:
        return None
    return match.group(1).strip() or None


def extract_credential(request: Any) -> str | None:
    """Return the first non-empty API credential carried by ``request``.

    Sources are tried in order: ``Authorization: Bearer <token>``, the
    ``X-API-Key`` header, the ``token`` cookie, then the ``api_key`` query
    parameter. A header that does not match the Bearer pattern is skipped.

    Args:
        request: A Starlette ``Request``/``HTTPConnection`` or any object
            exposing ``headers``, ``cookies`` and ``query_params`` mappings.

    Returns:
        The credential string, or ``None`` if no source carries one.
    """
    token = _bearer_token(request.headers.get(AUTHORIZATION_HEADER, ""))
    if token:
        logger.debug("API credential taken from Authorization header")
        return token

    api_key = request.headers.get(API_KEY_HEADER)
    if api_key:
        logger.debug("API credential taken from X-API-Key header")
        return api_key

    cookie = request.cookies.get(TOKEN_COOKIE)
    if cookie:
        logger.debug("API credential taken from '%s' cookie", TOKEN_COOKIE)
        return cookie

    query = request.query_params.get(API_KEY_QUERY_PARAM)
    if query:
        logger.debug("API credential taken from '%s' query parameter", API_KEY_QUERY_PARAM)
        return query

    return None
