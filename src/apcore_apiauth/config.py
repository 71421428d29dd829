"""Runtime environment for the API authentication layer."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from apcore_apiauth.errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_VAR = "APIAUTH_ENV"
ALLOW_TEST_MODE_VAR = "APIAUTH_ALLOW_TEST_MODE"

ENVIRONMENTS = ("production", "development", "testing")

_TRUTHY = {"1", "true", "yes"}


class AuthEnvironment:
    """Describes the deployment environment the resolver runs in.

    Test mode disables the ``X-API-CSRF`` header requirement for
    session-authenticated API calls. It can only be switched on when the
    deployment also sets the explicit allow flag, so a stray
    ``APIAUTH_ENV=testing`` alone never opens the bypass.

    Args:
        name: One of ``"production"``, ``"development"`` or ``"testing"``.
        allow_test_mode: Must be True for ``name="testing"`` to be accepted.
    """

    def __init__(self, name: str = "production", *, allow_test_mode: bool = False) -> None:
        name = name.strip().lower()
        if name not in ENVIRONMENTS:
            raise ConfigurationError(f"Unknown environment '{name}', expected one of: {', '.join(ENVIRONMENTS)}")
        if name == "testing" and not allow_test_mode:
            raise ConfigurationError(f"Test mode requested but {ALLOW_TEST_MODE_VAR} is not set")
        self._name = name
        if name == "testing":
            logger.warning("API auth running in test mode: CSRF header requirement is disabled")

    @property
    def name(self) -> str:
        return self._name

    def is_testing(self) -> bool:
        return self._name == "testing"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AuthEnvironment:
        """Build an environment from ``APIAUTH_ENV`` / ``APIAUTH_ALLOW_TEST_MODE``."""
        env = os.environ if environ is None else environ
        name = env.get(ENV_VAR, "production")
        allow = env.get(ALLOW_TEST_MODE_VAR, "").strip().lower() in _TRUTHY
        return cls(name, allow_test_mode=allow)

    def __repr__(self) -> str:
        return f"AuthEnvironment(name={self._name!r})"
