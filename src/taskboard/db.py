from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generator, List, Mapping, Optional

from .errors import AlreadyExists
from .models import TaskEntity, UserEntity
from .repositories import Repository, _task_changes
from .utils import MonotonicClock, new_id


@dataclass(frozen=True)
class _UserCols:
    table: str = "users"
    id: str = "id"
    email: str = "email"
    password_hash: str = "password_hash"
    created_at: str = "created_at"


@dataclass(frozen=True)
class _TaskCols:
    table: str = "tasks"
    id: str = "id"
    user_id: str = "user_id"
    title: str = "title"
    category: str = "category"
    is_today: str = "is_today"
    is_completed: str = "is_completed"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_U = _UserCols()
_T = _TaskCols()

_BOOL_COLUMNS = {"is_today", "is_completed"}


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._clock = MonotonicClock()
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_U.table} (
                    {_U.id} TEXT PRIMARY KEY,
                    {_U.email} TEXT NOT NULL UNIQUE,
                    {_U.password_hash} TEXT NOT NULL,
                    {_U.created_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_T.table} (
                    {_T.id} TEXT PRIMARY KEY,
                    {_T.user_id} TEXT NULL,
                    {_T.title} TEXT NOT NULL,
                    {_T.category} TEXT NOT NULL,
                    {_T.is_today} INTEGER NOT NULL DEFAULT 1,
                    {_T.is_completed} INTEGER NOT NULL DEFAULT 0,
                    {_T.created_at} TEXT NOT NULL,
                    {_T.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_T.table}_user_id ON {_T.table}({_T.user_id})"
            )

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> UserEntity:
        return {
            "id": str(row[_U.id]),
            "email": str(row[_U.email]),
            "password_hash": str(row[_U.password_hash]),
            "created_at": datetime.fromisoformat(row[_U.created_at]),
        }

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> TaskEntity:
        return {
            "id": str(row[_T.id]),
            "user_id": row[_T.user_id],
            "title": str(row[_T.title]),
            "category": str(row[_T.category]),
            "is_today": bool(row[_T.is_today]),
            "is_completed": bool(row[_T.is_completed]),
            "created_at": datetime.fromisoformat(row[_T.created_at]),
            "updated_at": datetime.fromisoformat(row[_T.updated_at]),
        }

    def _fetch_task(self, conn: sqlite3.Connection, task_id: str) -> Optional[sqlite3.Row]:
        return conn.execute(f"SELECT * FROM {_T.table} WHERE {_T.id} = ?", (task_id,)).fetchone()

    def create_user(self, email: str, password_hash: str) -> UserEntity:
        user_id = new_id()
        now = self._clock.now().isoformat()
        try:
            with self._conn() as conn:
                conn.execute(
                    f"""
                    INSERT INTO {_U.table} ({_U.id}, {_U.email}, {_U.password_hash}, {_U.created_at})
                    VALUES (?, ?, ?, ?)
                    """,
                    (user_id, email, password_hash, now),
                )
                row = conn.execute(f"SELECT * FROM {_U.table} WHERE {_U.id} = ?", (user_id,)).fetchone()
                assert row is not None
                return self._row_to_user(row)
        except sqlite3.IntegrityError as e:
            raise AlreadyExists("User already exists") from e

    def get_user(self, user_id: str) -> Optional[UserEntity]:
        with self._conn() as conn:
            row = conn.execute(f"SELECT * FROM {_U.table} WHERE {_U.id} = ?", (user_id,)).fetchone()
            return self._row_to_user(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[UserEntity]:
        with self._conn() as conn:
            row = conn.execute(f"SELECT * FROM {_U.table} WHERE {_U.email} = ?", (email,)).fetchone()
            return self._row_to_user(row) if row else None

    def create_task(self, owner_id: Optional[str], title: str, category: str, is_today: bool) -> TaskEntity:
        task_id = new_id()
        now = self._clock.now().isoformat()
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_T.table} ({_T.id}, {_T.user_id}, {_T.title}, {_T.category},
                    {_T.is_today}, {_T.is_completed}, {_T.created_at}, {_T.updated_at})
                VALUES (?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (task_id, owner_id, title, category, 1 if is_today else 0, now, now),
            )
            row = self._fetch_task(conn, task_id)
            assert row is not None
            return self._row_to_task(row)

    def get_task(self, task_id: str) -> Optional[TaskEntity]:
        with self._conn() as conn:
            row = self._fetch_task(conn, task_id)
            return self._row_to_task(row) if row else None

    def list_tasks_by_owner(self, owner_id: str) -> List[TaskEntity]:
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_T.table} WHERE {_T.user_id} = ?", (owner_id,)
            ).fetchall()
            return [self._row_to_task(r) for r in rows]

    def update_task(self, task_id: str, fields: Mapping[str, Any]) -> Optional[TaskEntity]:
        changes = _task_changes(fields)
        # Column names come from the MUTABLE_TASK_FIELDS whitelist, never from input
        assignments = [f"{name} = ?" for name in changes]
        params: List[Any] = [
            (1 if value else 0) if name in _BOOL_COLUMNS else value for name, value in changes.items()
        ]
        assignments.append(f"{_T.updated_at} = ?")
        params.append(self._clock.now().isoformat())

        with self._conn() as conn:
            cur = conn.execute(
                f"UPDATE {_T.table} SET {', '.join(assignments)} WHERE {_T.id} = ?",
                [*params, task_id],
            )
            if cur.rowcount == 0:
                return None
            row = self._fetch_task(conn, task_id)
            assert row is not None
            return self._row_to_task(row)

    def delete_task(self, task_id: str) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_T.table} WHERE {_T.id} = ?", (task_id,))
            return cur.rowcount > 0
