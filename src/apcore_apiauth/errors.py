"""Exception types raised by apcore-apiauth."""

from __future__ import annotations


class ApiAuthError(Exception):
    """Base class for apcore-apiauth errors."""


class CsrfValidationError(ApiAuthError):
    """A supplied anti-forgery token could not be verified.

    Raised by ``CsrfVerifier`` implementations. The CSRF gate treats it as
    a denial, never as a fault.
    """

    def __init__(self, namespace: str, reason: str) -> None:
        super().__init__(f"CSRF validation failed for namespace '{namespace}': {reason}")
        self.namespace = namespace
        self.reason = reason


class ConfigurationError(ApiAuthError, ValueError):
    """Invalid authentication environment configuration."""
