from __future__ import annotations

from typing import Optional


# PUBLIC_INTERFACE
class ServiceError(Exception):
    """
    Base class for errors that terminate a request with a short message.

    Subclasses fix the HTTP status and the public message. The message is the
    only detail ever returned to the client.
    """

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class InvalidInput(ServiceError):
    """Malformed or missing fields."""

    status_code = 400
    message = "Invalid data"


class DuplicateUsername(InvalidInput):
    """Username already taken. Reported to clients as plain InvalidInput."""

    @property
    def kind(self) -> str:
        return "InvalidInput"


class Unauthenticated(ServiceError):
    status_code = 401
    message = "Access denied"


class TokenInvalid(ServiceError):
    # Bad signature, malformed or expired token. 400 rather than 401.
    status_code = 400
    message = "Invalid token"


class InvalidCredentials(ServiceError):
    status_code = 401
    message = "Invalid credentials"


class NotFound(ServiceError):
    status_code = 404
    message = "Todo not found"


class HashingError(ServiceError):
    """Password hashing failed; fatal for the request."""

    status_code = 500
    message = "Internal server error"
