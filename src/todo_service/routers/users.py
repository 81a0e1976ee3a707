"""
Account routes: register, login.

Route prefix: /users
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from ..dependencies import get_password_hasher, get_token_service, get_user_repository
from ..errors import InvalidCredentials
from ..passwords import PasswordHasher
from ..repositories import UserRepository
from ..schemas import Credentials, LoginIn, RegisterOut, TokenOut
from ..tokens import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


# PUBLIC_INTERFACE
@router.post(
    "/register",
    response_model=RegisterOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a new account. Usernames are unique and case-sensitive.",
    responses={
        201: {"description": "User registered"},
        400: {"description": "Invalid data or username already taken"},
    },
)
def register(
    payload: Credentials,
    users: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> RegisterOut:
    """
    Register a new user.
    """
    user = users.create(payload.username, hasher.hash(payload.password))
    logger.info("Registered user %s (id=%s)", user["username"], user["id"])
    return RegisterOut(message="User registered successfully")


# PUBLIC_INTERFACE
@router.post(
    "/login",
    response_model=TokenOut,
    summary="Login",
    description="Exchange username and password for a bearer token valid for one hour.",
    responses={
        200: {"description": "Token issued"},
        401: {"description": "Invalid credentials"},
    },
)
def login(
    payload: LoginIn,
    users: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> TokenOut:
    """
    Login with username + password.
    """
    user = users.find_by_username(payload.username)
    if user is None or not hasher.verify(payload.password, user["password_hash"]):
        logger.warning("Failed login for %s", payload.username)
        raise InvalidCredentials()

    logger.info("Login: %s (id=%s)", user["username"], user["id"])
    return TokenOut(token=tokens.issue(user["id"]))
