from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import RLock
from typing import Dict, List, Optional

from .errors import DuplicateUsername, NotFound
from .models import TodoEntity, UserEntity
from .schemas import TodoUpdate
from .settings import Settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
class UserRepository(ABC):
    """Abstract repository contract for user credential storage."""

    @abstractmethod
    def create(self, username: str, password_hash: str) -> UserEntity:
        """Create and return a new UserEntity. Raise DuplicateUsername if the name is taken."""

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[UserEntity]:
        """Return the user with exactly this (case-sensitive) username, or None."""

    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[UserEntity]:
        """Return a UserEntity by id, or None if not found."""


# PUBLIC_INTERFACE
class TodoRepository(ABC):
    """
    Abstract repository contract for todo storage backends.

    Every read and write is scoped to an owner. A todo that exists but belongs
    to someone else is reported exactly like a missing one.
    """

    @abstractmethod
    def list(self, owner_id: int) -> List[TodoEntity]:
        """Return all todos of ``owner_id`` in storage order."""

    @abstractmethod
    def create(self, owner_id: int, title: str) -> TodoEntity:
        """Create and return a new, not yet completed TodoEntity."""

    @abstractmethod
    def get(self, todo_id: int, owner_id: int) -> TodoEntity:
        """Return a TodoEntity by id. Raise NotFound if absent or not owned."""

    @abstractmethod
    def update(self, todo_id: int, owner_id: int, data: TodoUpdate) -> TodoEntity:
        """Apply the provided fields and return the updated entity. Raise NotFound if absent or not owned."""

    @abstractmethod
    def delete(self, todo_id: int, owner_id: int) -> None:
        """Delete a TodoEntity by id. Raise NotFound if absent or not owned."""


class InMemoryUserRepository(UserRepository):
    """
    Thread-safe in-memory user store suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[int, UserEntity] = {}
        self._by_username: Dict[str, int] = {}
        self._next_id = 1

    def create(self, username: str, password_hash: str) -> UserEntity:
        now = utcnow()
        with self._lock:
            if username in self._by_username:
                raise DuplicateUsername()
            entity: UserEntity = {
                "id": self._next_id,
                "username": username,
                "password_hash": password_hash,
                "created_at": now,
                "updated_at": now,
            }
            self._next_id += 1
            self._items[entity["id"]] = entity
            self._by_username[username] = entity["id"]
            return entity.copy()

    def find_by_username(self, username: str) -> Optional[UserEntity]:
        with self._lock:
            user_id = self._by_username.get(username)
            return None if user_id is None else self._items[user_id].copy()

    def find_by_id(self, user_id: int) -> Optional[UserEntity]:
        with self._lock:
            item = self._items.get(user_id)
            return None if item is None else item.copy()


class InMemoryTodoRepository(TodoRepository):
    """
    Thread-safe in-memory todo store suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[int, TodoEntity] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def _owned(self, todo_id: int, owner_id: int) -> TodoEntity:
        item = self._items.get(todo_id)
        if item is None or item["owner_id"] != owner_id:
            raise NotFound()
        return item

    def list(self, owner_id: int) -> List[TodoEntity]:
        with self._lock:
            return [t.copy() for t in self._items.values() if t["owner_id"] == owner_id]

    def create(self, owner_id: int, title: str) -> TodoEntity:
        now = utcnow()
        entity: TodoEntity = {
            "id": self._allocate_id(),
            "title": title,
            "completed": False,
            "owner_id": owner_id,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()

    def get(self, todo_id: int, owner_id: int) -> TodoEntity:
        with self._lock:
            return self._owned(todo_id, owner_id).copy()

    def update(self, todo_id: int, owner_id: int, data: TodoUpdate) -> TodoEntity:
        with self._lock:
            updated = self._owned(todo_id, owner_id).copy()

            # Update only provided fields
            if data.title is not None:
                updated["title"] = data.title
            if data.completed is not None:
                updated["completed"] = data.completed
            updated["updated_at"] = utcnow()

            self._items[todo_id] = updated
            return updated.copy()

    def delete(self, todo_id: int, owner_id: int) -> None:
        with self._lock:
            self._owned(todo_id, owner_id)
            del self._items[todo_id]


@dataclass(frozen=True)
class Repositories:
    """The credential store and the todo store of one backend."""

    users: UserRepository
    todos: TodoRepository


# PUBLIC_INTERFACE
def get_repositories(settings: Settings) -> Repositories:
    """
    Factory returning the repositories configured by ``settings``.
    - memory: InMemoryUserRepository / InMemoryTodoRepository
    - sqlite: SQLiteUserRepository / SQLiteTodoRepository on settings.database_name
    """
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteDatabase, SQLiteTodoRepository, SQLiteUserRepository

        database = SQLiteDatabase(settings.database_name)
        return Repositories(users=SQLiteUserRepository(database), todos=SQLiteTodoRepository(database))
    return Repositories(users=InMemoryUserRepository(), todos=InMemoryTodoRepository())
