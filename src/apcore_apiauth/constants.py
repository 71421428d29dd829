"""Constants shared across apcore-apiauth."""

from __future__ import annotations

# Request sources for API credentials, in lookup order
AUTHORIZATION_HEADER = "authorization"
API_KEY_HEADER = "x-api-key"
TOKEN_COOKIE = "token"
API_KEY_QUERY_PARAM = "api_key"

# Anti-forgery header for session-authenticated API calls
CSRF_HEADER = "x-api-csrf"

# CSRF namespace for the API surface (web forms use their own namespaces)
API_CSRF_NAMESPACE = "api"

SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})

# Key under scope["state"] / request.state holding the resolved identity
REQUEST_IDENTITY_ATTR = "user"

IDENTITY_TYPE_API_KEY = "api_key"
