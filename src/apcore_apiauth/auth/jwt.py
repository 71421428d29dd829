"""Signed API keys: JWT credentials issued to API-key principals."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import jwt as pyjwt
from apcore import Identity

from apcore_apiauth.auth.protocol import KeyStore
from apcore_apiauth.constants import IDENTITY_TYPE_API_KEY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimMapping:
    """Names of the claims carried by a signed API key.

    Attributes:
        owner_claim: Principal the key acts for, used as ``Identity.id``.
        key_id_claim: Unique key id, exposed as ``Identity.attrs["key_id"]``
            and checked against the revocation callback.
        scopes_claim: Granted scopes, either a list or an OAuth-style
            space-separated string, used as ``Identity.roles``.
    """

    owner_claim: str = "sub"
    key_id_claim: str = "jti"
    scopes_claim: str = "scope"


class JWTKeyStore:
    """``KeyStore`` accepting signed JWTs as API keys.

    Every accepted key yields an ``Identity`` of type ``"api_key"``. When
    ``is_revoked`` is given, keys without a key id are refused since they
    cannot be revoked.

    Args:
        key: Secret key or public key for verification.
        algorithms: Allowed JWT algorithms.
        audience: Expected ``aud`` claim (optional).
        issuer: Expected ``iss`` claim (optional).
        claim_mapping: Claim names for owner, key id and scopes.
        require_claims: Claims that must be present in the token.
        is_revoked: Returns True for key ids that must no longer authenticate.
    """

    def __init__(
        self,
        key: str,
        *,
        algorithms: list[str] | None = None,
        audience: str | None = None,
        issuer: str | None = None,
        claim_mapping: ClaimMapping | None = None,
        require_claims: list[str] | None = None,
        is_revoked: Callable[[str], bool] | None = None,
    ) -> None:
        self._key = key
        self._algorithms = algorithms or ["HS256"]
        self._audience = audience
        self._issuer = issuer
        self._claims = claim_mapping or ClaimMapping()
        self._require_claims: list[str] = require_claims if require_claims is not None else ["sub"]
        self._is_revoked = is_revoked

    def authenticate(self, credential: str) -> Identity | None:
        """Verify ``credential`` and return the API-key principal it grants."""
        payload = self._verify(credential)
        if payload is None:
            return None

        owner = payload.get(self._claims.owner_claim)
        if owner is None:
            return None

        key_id = payload.get(self._claims.key_id_claim)
        if self._is_revoked is not None:
            if key_id is None:
                logger.debug("Signed API key without key id refused")
                return None
            if self._is_revoked(str(key_id)):
                logger.debug("Signed API key %s is revoked", key_id)
                return None

        attrs: dict[str, Any] = {}
        if key_id is not None:
            attrs["key_id"] = str(key_id)

        return Identity(
            id=str(owner),
            type=IDENTITY_TYPE_API_KEY,
            roles=_scopes(payload.get(self._claims.scopes_claim)),
            attrs=attrs,
        )

    def _verify(self, token: str) -> dict[str, Any] | None:
        options: dict[str, Any] = {}
        if self._require_claims:
            options["require"] = self._require_claims

        try:
            return pyjwt.decode(
                token,
                self._key,
                algorithms=self._algorithms,
                audience=self._audience,
                issuer=self._issuer,
                options=options,
            )
        except pyjwt.InvalidTokenError:
            logger.debug("Signed API key rejected", exc_info=True)
            return None


def _scopes(raw: Any) -> tuple[str, ...]:
    if isinstance(raw, str):
        return tuple(raw.split())
    if isinstance(raw, list):
        return tuple(str(s) for s in raw)
    return ()


# Verify protocol compliance at import time
assert isinstance(JWTKeyStore.__new__(JWTKeyStore), KeyStore)
