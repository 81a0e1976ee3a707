from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .passwords import MAX_PASSWORD_BYTES

USERNAME_MAX_LENGTH = 128
TITLE_MAX_LENGTH = 128


def _clean_title(v: str) -> str:
    s = v.strip()
    if not (1 <= len(s) <= TITLE_MAX_LENGTH):
        raise ValueError(f"title length must be between 1 and {TITLE_MAX_LENGTH} characters")
    return s


# PUBLIC_INTERFACE
class Credentials(BaseModel):
    """
    Body of the register call.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"username": "alice", "password": "secret1"}}
    )

    username: str = Field(..., description="Unique login name", min_length=1, max_length=USERNAME_MAX_LENGTH)
    password: str = Field(..., description="Plaintext password", min_length=1)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """
        Reject passwords bcrypt would silently truncate.
        """
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


# PUBLIC_INTERFACE
class LoginIn(BaseModel):
    """
    Body of the login call. Only presence is checked; anything that cannot
    match a stored account fails as invalid credentials.
    """

    username: str = Field(..., description="Login name")
    password: str = Field(..., description="Plaintext password")


class RegisterOut(BaseModel):
    message: str = Field(..., description="Confirmation message")


class TokenOut(BaseModel):
    token: str = Field(..., description="Signed bearer token, valid for one hour")


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item. The owner comes from the bearer token.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "buy milk"}})

    title: str = Field(..., description="Short title for the todo item")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..128 length.
        """
        return _clean_title(v)


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    All fields are optional; only provided fields will be updated.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "buy oat milk", "completed": True}}
    )

    title: Optional[str] = Field(default=None, description="Short title for the todo item")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        """
        If title is provided, strip whitespace and enforce 1..128 length.
        """
        if v is None:
            return v
        return _clean_title(v)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "buy milk",
                "completed": False,
                "owner_id": 1,
                "created_at": "2025-01-25T10:15:30.123456+00:00",
                "updated_at": "2025-01-26T09:00:00.000001+00:00",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    completed: bool = Field(..., description="Completion status flag")
    owner_id: int = Field(..., description="Identifier of the owning user")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
