from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

from .errors import DuplicateUsername, NotFound
from .models import TodoEntity, UserEntity
from .repositories import TodoRepository, UserRepository, utcnow
from .schemas import TodoUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _UserCols:
    table: str = "users"
    id: str = "id"
    username: str = "username"
    password_hash: str = "password_hash"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


@dataclass(frozen=True)
class _TodoCols:
    table: str = "todos"
    id: str = "id"
    title: str = "title"
    completed: str = "completed"
    owner_id: str = "owner_id"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_USERS = _UserCols()
_TODOS = _TodoCols()

# sqlite INTEGER is a signed 64-bit value; larger ids cannot be bound
_MAX_ROWID = 2**63 - 1


class SQLiteDatabase:
    """
    Connection factory and schema owner for the sqlite backend.

    Each operation gets its own short-lived connection; the schema is created
    when the database object is constructed.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @property
    def path(self) -> str:
        return self._db_path

    @contextmanager
    def connect(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self.connect() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_USERS.table} (
                    {_USERS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_USERS.username} VARCHAR(128) NOT NULL UNIQUE,
                    {_USERS.password_hash} VARCHAR(128) NOT NULL,
                    {_USERS.created_at} TEXT NOT NULL,
                    {_USERS.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_TODOS.table} (
                    {_TODOS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_TODOS.title} VARCHAR(128) NOT NULL,
                    {_TODOS.completed} INTEGER NOT NULL DEFAULT 0,
                    {_TODOS.owner_id} INTEGER NOT NULL REFERENCES {_USERS.table}({_USERS.id}),
                    {_TODOS.created_at} TEXT NOT NULL,
                    {_TODOS.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_TODOS.table}_owner_id ON {_TODOS.table}({_TODOS.owner_id})"
            )
        logger.info("SQLite schema ready at %s", self._db_path)


def _parse_dt(s: str) -> datetime:
    return datetime.fromisoformat(s)


class SQLiteUserRepository(UserRepository):
    """
    SQLite credential store. Username uniqueness is enforced by the table's
    UNIQUE constraint.
    """

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def _row_to_entity(self, row: sqlite3.Row) -> UserEntity:
        return {
            "id": int(row[_USERS.id]),
            "username": str(row[_USERS.username]),
            "password_hash": str(row[_USERS.password_hash]),
            "created_at": _parse_dt(row[_USERS.created_at]),
            "updated_at": _parse_dt(row[_USERS.updated_at]),
        }

    def create(self, username: str, password_hash: str) -> UserEntity:
        now = utcnow().isoformat()
        with self._db.connect() as conn:
            try:
                cur = conn.execute(
                    f"""
                    INSERT INTO {_USERS.table} ({_USERS.username}, {_USERS.password_hash},
                        {_USERS.created_at}, {_USERS.updated_at})
                    VALUES (?, ?, ?, ?)
                    """,
                    (username, password_hash, now, now),
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateUsername() from exc
            row = conn.execute(
                f"SELECT * FROM {_USERS.table} WHERE {_USERS.id} = ?", (cur.lastrowid,)
            ).fetchone()
            assert row is not None
            return self._row_to_entity(row)

    def find_by_username(self, username: str) -> Optional[UserEntity]:
        with self._db.connect() as conn:
            try:
                row = conn.execute(
                    f"SELECT * FROM {_USERS.table} WHERE {_USERS.username} = ?", (username,)
                ).fetchone()
            except UnicodeEncodeError:
                # not representable in the table, so no such user
                return None
            return self._row_to_entity(row) if row else None

    def find_by_id(self, user_id: int) -> Optional[UserEntity]:
        with self._db.connect() as conn:
            row = conn.execute(f"SELECT * FROM {_USERS.table} WHERE {_USERS.id} = ?", (user_id,)).fetchone()
            return self._row_to_entity(row) if row else None


class SQLiteTodoRepository(TodoRepository):
    """
    SQLite todo store. Ownership is part of every WHERE clause.
    """

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def _row_to_entity(self, row: sqlite3.Row) -> TodoEntity:
        return {
            "id": int(row[_TODOS.id]),
            "title": str(row[_TODOS.title]),
            "completed": bool(row[_TODOS.completed]),
            "owner_id": int(row[_TODOS.owner_id]),
            "created_at": _parse_dt(row[_TODOS.created_at]),
            "updated_at": _parse_dt(row[_TODOS.updated_at]),
        }

    def _fetch_owned(self, conn: sqlite3.Connection, todo_id: int, owner_id: int) -> sqlite3.Row:
        if not (0 < todo_id <= _MAX_ROWID):
            raise NotFound()
        row = conn.execute(
            f"SELECT * FROM {_TODOS.table} WHERE {_TODOS.id} = ? AND {_TODOS.owner_id} = ?",
            (todo_id, owner_id),
        ).fetchone()
        if row is None:
            raise NotFound()
        return row

    def list(self, owner_id: int) -> List[TodoEntity]:
        with self._db.connect() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_TODOS.table} WHERE {_TODOS.owner_id} = ?", (owner_id,)
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def create(self, owner_id: int, title: str) -> TodoEntity:
        now = utcnow().isoformat()
        with self._db.connect() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_TODOS.table} ({_TODOS.title}, {_TODOS.completed}, {_TODOS.owner_id},
                    {_TODOS.created_at}, {_TODOS.updated_at})
                VALUES (?, 0, ?, ?, ?)
                """,
                (title, owner_id, now, now),
            )
            row = conn.execute(
                f"SELECT * FROM {_TODOS.table} WHERE {_TODOS.id} = ?", (cur.lastrowid,)
            ).fetchone()
            assert row is not None
            return self._row_to_entity(row)

    def get(self, todo_id: int, owner_id: int) -> TodoEntity:
        with self._db.connect() as conn:
            return self._row_to_entity(self._fetch_owned(conn, todo_id, owner_id))

    def update(self, todo_id: int, owner_id: int, data: TodoUpdate) -> TodoEntity:
        with self._db.connect() as conn:
            current = self._row_to_entity(self._fetch_owned(conn, todo_id, owner_id))

            title = data.title if data.title is not None else current["title"]
            completed = data.completed if data.completed is not None else current["completed"]
            conn.execute(
                f"""
                UPDATE {_TODOS.table}
                SET {_TODOS.title} = ?, {_TODOS.completed} = ?, {_TODOS.updated_at} = ?
                WHERE {_TODOS.id} = ?
                """,
                (title, 1 if completed else 0, utcnow().isoformat(), todo_id),
            )
            return self._row_to_entity(self._fetch_owned(conn, todo_id, owner_id))

    def delete(self, todo_id: int, owner_id: int) -> None:
        if not (0 < todo_id <= _MAX_ROWID):
            raise NotFound()
        with self._db.connect() as conn:
            cur = conn.execute(
                f"DELETE FROM {_TODOS.table} WHERE {_TODOS.id} = ? AND {_TODOS.owner_id} = ?",
                (todo_id, owner_id),
            )
            if cur.rowcount == 0:
                raise NotFound()
