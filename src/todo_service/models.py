from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class UserEntity(TypedDict):
    """
    A registered account as stored by the credential repositories.

    Fields:
    - id: Unique integer identifier, assigned on insert
    - username: Unique, case-sensitive login name (1..128 chars)
    - password_hash: bcrypt digest; never serialized in responses
    - created_at: creation timestamp (UTC)
    - updated_at: last write timestamp (UTC)
    """

    id: int
    username: str
    password_hash: str
    created_at: datetime
    updated_at: datetime


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A todo item owned by exactly one user.

    Fields:
    - id: Unique integer identifier
    - title: Short title (1..128 chars, trimmed on input via schemas)
    - completed: Boolean completion flag
    - owner_id: id of the owning user, fixed at creation
    - created_at: creation timestamp (UTC)
    - updated_at: last update timestamp (UTC)
    """

    id: int
    title: str
    completed: bool
    owner_id: int
    created_at: datetime
    updated_at: datetime
