"""In-memory API key store with hashed verifiers."""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
import threading
from dataclasses import dataclass

from apcore import Identity

from apcore_apiauth.auth.protocol import KeyStore

logger = logging.getLogger(__name__)


def _hash_verifier(verifier: str) -> str:
    return hashlib.sha256(verifier.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class _StoredKey:
    verifier_hash: str
    identity: Identity


class InMemoryKeyStore:
    """``KeyStore`` holding ``<identifier>:<verifier>`` API keys in memory.

    Only a SHA-256 digest of the verifier is kept, so the plaintext key is
    available exactly once, from ``add()``.
    """

    def __init__(self) -> None:
        self._keys: dict[str, _StoredKey] = {}
        self._lock = threading.Lock()

    def add(self, identity: Identity) -> str:
        """Mint a key for ``identity`` and return it in plaintext."""
        identifier = secrets.token_hex(8)
        verifier = secrets.token_hex(16)
        with self._lock:
            self._keys[identifier] = _StoredKey(_hash_verifier(verifier), identity)
        logger.info("Created API key %s for %s", identifier, identity.id)
        return f"{identifier}:{verifier}"

    def revoke(self, identifier: str) -> bool:
        """Remove a key by its identifier. Returns False if it was unknown."""
        with self._lock:
            removed = self._keys.pop(identifier, None)
        if removed is not None:
            logger.info("Revoked API key %s", identifier)
        return removed is not None

    def authenticate(self, credential: str) -> Identity | None:
        identifier, sep, verifier = credential.partition(":")
        if not sep or not identifier or not verifier:
            return None

        stored = self._keys.get(identifier)
        if stored is None:
            return None
        if not hmac.compare_digest(stored.verifier_hash, _hash_verifier(verifier)):
            return None
        return stored.identity

    def __len__(self) -> int:
        return len(self._keys)


# Verify protocol compliance at import time
assert isinstance(InMemoryKeyStore(), KeyStore)
