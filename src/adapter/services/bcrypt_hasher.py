"""
Bcrypt Secret Hasher

Hashes passwords and refresh tokens with bcrypt. Bcrypt only reads the first
72 bytes, so longer inputs are SHA-256 hashed and base64 encoded first.
"""

import base64
import hashlib

import bcrypt

from src.app.services.secret_hasher import ISecretHasher

BCRYPT_MAX_BYTES = 72


def _prepare(secret: str) -> bytes:
    secret_bytes = secret.encode("utf-8")
    if len(secret_bytes) <= BCRYPT_MAX_BYTES:
        return secret_bytes
    return base64.b64encode(hashlib.sha256(secret_bytes).digest())


class BcryptSecretHasher(ISecretHasher):
    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    def hash(self, secret: str) -> str:
        return bcrypt.hashpw(_prepare(secret), bcrypt.gensalt(self.rounds)).decode("utf-8")

    def verify(self, secret: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(_prepare(secret), hashed.encode("utf-8"))
        except (ValueError, AttributeError):
            # Malformed stored hash
            return False

    def dummy_verify(self) -> None:
        bcrypt.checkpw(b"not_the_dummy_password", self._dummy_hash)
