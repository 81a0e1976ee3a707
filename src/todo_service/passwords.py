"""
Password hashing and verification.

Uses bcrypt with automatic salting and a fixed work factor. The digest
embeds both salt and cost, so verification needs nothing but the digest.
"""

from __future__ import annotations

import logging

import bcrypt

from .errors import HashingError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


# PUBLIC_INTERFACE
class PasswordHasher:
    """One-way salted hashing of user passwords."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self._rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Hash a password with bcrypt (auto-salted). Raises HashingError on failure."""
        try:
            return bcrypt.hashpw(plaintext.encode(), bcrypt.gensalt(rounds=self._rounds)).decode()
        except (ValueError, TypeError) as exc:
            logger.error("Password hashing failed: %s", type(exc).__name__)
            raise HashingError() from exc

    def verify(self, plaintext: str, digest: str) -> bool:
        """Constant-time comparison against a bcrypt hash. False on mismatch or bad digest."""
        try:
            encoded = plaintext.encode()
            if len(encoded) > MAX_PASSWORD_BYTES:
                # longer inputs are never registered
                return False
            return bcrypt.checkpw(encoded, digest.encode())
        except (ValueError, TypeError):
            return False
