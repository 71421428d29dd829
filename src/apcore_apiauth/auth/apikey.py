"""Resolve a candidate API credential to an identity through a KeyStore."""

from __future__ import annotations

import logging

from apcore import Identity

from apcore_apiauth.auth.protocol import KeyStore

logger = logging.getLogger(__name__)


class ApiKeyResolver:
    """Delegates credential lookup to a ``KeyStore``.

    No validation happens here. A miss is reported as ``None`` so the
    caller can fall back to the session path; store errors propagate.
    """

    def __init__(self, key_store: KeyStore) -> None:
        self._key_store = key_store

    def resolve(self, credential: str | None) -> Identity | None:
        if not credential:
            return None
        identity = self._key_store.authenticate(credential)
        if identity is None:
            logger.debug("API credential did not match any key")
        return identity
