"""
Signed bearer tokens.

Tokens are HS256 JWTs carrying the user id in ``sub`` and an ``exp`` one
hour after issuance. The signing secret comes from ``Settings.secret_key``
and is fixed for the lifetime of the process.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt

from .errors import TokenInvalid

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_TTL = timedelta(hours=1)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
class TokenService:
    """Issues and verifies time-limited bearer tokens."""

    def __init__(self, secret_key: str, ttl: timedelta = TOKEN_TTL, clock: Optional[Clock] = None) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._ttl = ttl
        self._clock = clock or _utcnow

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: int) -> str:
        """Create a signed token for ``user_id`` expiring ``ttl`` from now."""
        issued_at = self._clock()
        claims = {
            "sub": str(user_id),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> int:
        """
        Verify ``token`` and return the user id it was issued for.

        Raises TokenInvalid on a bad signature, malformed token, bad subject
        or expired token. The cases are not distinguished.
        """
        try:
            claims = jwt.decode(
                token, self._secret_key, algorithms=[ALGORITHM], options={"require_exp": True}
            )
        except JWTError as exc:
            logger.debug("Token rejected: %s", exc)
            raise TokenInvalid() from exc

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject.isdigit():
            logger.debug("Token rejected: bad subject")
            raise TokenInvalid()
        return int(subject)
