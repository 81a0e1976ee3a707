from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ..dependencies import current_user_id, get_todo_repository
from ..repositories import TodoRepository
from ..schemas import TodoCreate, TodoOut, TodoUpdate

logger = logging.getLogger(__name__)

_AUTH_RESPONSES = {
    400: {"description": "Invalid data or invalid token"},
    401: {"description": "Missing bearer token"},
}

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
    responses=_AUTH_RESPONSES,
)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="List all todos of the authenticated user.",
    responses={200: {"description": "List retrieved successfully"}},
)
def list_todos(
    user_id: int = Depends(current_user_id),
    repo: TodoRepository = Depends(get_todo_repository),
) -> List[TodoOut]:
    """
    List the caller's todos in storage order.
    """
    return [TodoOut(**it) for it in repo.list(user_id)]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item owned by the authenticated user.",
    responses={201: {"description": "Todo created successfully"}},
)
def create_todo(
    payload: TodoCreate,
    user_id: int = Depends(current_user_id),
    repo: TodoRepository = Depends(get_todo_repository),
) -> TodoOut:
    """
    Create a new Todo.
    """
    created = repo.create(user_id, payload.title)
    logger.debug("User %s created todo %s", user_id, created["id"])
    return TodoOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
def get_todo(
    todo_id: int,
    user_id: int = Depends(current_user_id),
    repo: TodoRepository = Depends(get_todo_repository),
) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    return TodoOut(**repo.get(todo_id, user_id))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description="Update the title and/or completion flag of a Todo item. Omitted fields are left unchanged.",
    responses={
        200: {"description": "Todo updated"},
        404: {"description": "Todo not found"},
    },
)
def update_todo(
    todo_id: int,
    payload: TodoUpdate,
    user_id: int = Depends(current_user_id),
    repo: TodoRepository = Depends(get_todo_repository),
) -> TodoOut:
    """
    Partial update of a Todo item.
    """
    updated = repo.update(todo_id, user_id, payload)
    logger.debug("User %s updated todo %s", user_id, todo_id)
    return TodoOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        204: {"description": "Todo deleted"},
        404: {"description": "Todo not found"},
    },
)
def delete_todo(
    todo_id: int,
    user_id: int = Depends(current_user_id),
    repo: TodoRepository = Depends(get_todo_repository),
) -> None:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    repo.delete(todo_id, user_id)
    logger.debug("User %s deleted todo %s", user_id, todo_id)
    return None
