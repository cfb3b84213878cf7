"""
Share Store
In-memory custody of shares on a single node, keyed by ceremony id.

Shares are sealed with AES-256-GCM under a key that exists only inside this
object, with the ceremony id bound as associated data. Nothing is written to
disk: when the process ends, the key and every held share go with it.
"""

import os
import threading
from contextlib import contextmanager

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from quorum.shamir import Share

NONCE_SIZE = 12  # AES-256-GCM standard


def _associated_data(ceremony_id: str) -> bytes:
    # Ceremony ids are opaque strings; lone surrogates must still encode
    return ceremony_id.encode("utf-8", "surrogatepass")


class _SharedExclusiveLock:
    """Many readers at once, or one writer alone. Waiting writers go first."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def shared(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def exclusive(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ShareStore:
    """
    Thread-safe mapping from ceremony id to Share.

    A node holds at most one share per ceremony. Storing again under the
    same id replaces the previous share.
    """

    def __init__(self):
        self._lock = _SharedExclusiveLock()
        self._sealed: dict[str, bytes] = {}
        self._aesgcm = AESGCM(AESGCM.generate_key(bit_length=256))

    def _seal(self, ceremony_id: str, share: Share) -> bytes:
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = self._aesgcm.encrypt(nonce, share.to_bytes(), _associated_data(ceremony_id))
        return nonce + ciphertext

    def _unseal(self, ceremony_id: str, sealed: bytes) -> Share:
        nonce = sealed[:NONCE_SIZE]
        ciphertext = sealed[NONCE_SIZE:]
        plaintext = self._aesgcm.decrypt(nonce, ciphertext, _associated_data(ceremony_id))
        return Share.from_bytes(plaintext)

    def store(self, ceremony_id: str, share: Share) -> None:
        """Store (or overwrite) the share for a ceremony."""
        sealed = self._seal(ceremony_id, share)
        with self._lock.exclusive():
            self._sealed[ceremony_id] = sealed

    def retrieve(self, ceremony_id: str) -> Share | None:
        """Return the share for a ceremony, or None if this node holds none."""
        with self._lock.shared():
            sealed = self._sealed.get(ceremony_id)
        if sealed is None:
            return None
        return self._unseal(ceremony_id, sealed)

    def exists(self, ceremony_id: str) -> bool:
        with self._lock.shared():
            return ceremony_id in self._sealed

    def __len__(self) -> int:
        with self._lock.shared():
            return len(self._sealed)
