"""
FastAPI dependencies.

Components are built once by ``create_app`` and kept on ``app.state``; the
providers below hand them to route handlers.
"""

from __future__ import annotations

from fastapi import Depends, Request

from .gate import AuthGate
from .passwords import PasswordHasher
from .repositories import TodoRepository, UserRepository
from .settings import Settings
from .tokens import TokenService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.repositories.users


def get_todo_repository(request: Request) -> TodoRepository:
    return request.app.state.repositories.todos


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_gate(request: Request) -> AuthGate:
    return request.app.state.auth_gate


# PUBLIC_INTERFACE
def current_user_id(request: Request, gate: AuthGate = Depends(get_auth_gate)) -> int:
    """
    Authenticate the request's bearer token and return the caller's user id.

    The id is also stored on ``request.state.user_id``.
    """
    user_id = gate.authenticate(request.headers.get("Authorization"))
    request.state.user_id = user_id
    return user_id
