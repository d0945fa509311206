# src/ai_todolist/todos/todo_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from .category import classify_category
from .timeutil import Clock, combine_date_time, derive_alert, now_canonical, to_canonical
from .todo_models import Todo

logger = logging.getLogger(__name__)


class TodoStore:
    """
    SQLite todo store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Instants are stored as canonical local-time TEXT ("YYYY-MM-DD HH:MM"), so the
    reminder query compares them lexically.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "todos.sqlite3", *, clock: Clock | None = None) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._clock = clock
        self._ensure_schema()
        try:
            total = self.count_todos()
        except Exception:
            total = -1
        logger.info("TodoStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _now(self) -> str:
        return now_canonical(self._clock)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS todos (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    category TEXT,
                    priority INTEGER,
                    tags TEXT,
                    alert_at TEXT,
                    due_at TEXT,
                    completed INTEGER NOT NULL DEFAULT 0,
                    pinned INTEGER NOT NULL DEFAULT 0,
                    notified INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT,
                    updated_at TEXT,
                    deleted_at TEXT
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(todos)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> bool:
                if name in cols:
                    return False
                cur.execute(f"ALTER TABLE todos ADD COLUMN {name} {decl}")
                logger.info("TodoStore migration: added column %s", name)
                return True

            add_col("category", "TEXT")
            add_col("priority", "INTEGER")
            add_col("tags", "TEXT")
            add_col("alert_at", "TEXT")
            add_col("due_at", "TEXT")
            add_col("completed", "INTEGER NOT NULL DEFAULT 0")
            add_col("pinned", "INTEGER NOT NULL DEFAULT 0")
            add_col("created_at", "TEXT")
            add_col("updated_at", "TEXT")
            add_col("deleted_at", "TEXT")

            if add_col("notified", "INTEGER NOT NULL DEFAULT 0"):
                # Alerts that already passed before reminders existed are not replayed.
                cur.execute(
                    """
                    UPDATE todos
                    SET notified = 1
                    WHERE alert_at IS NOT NULL
                      AND alert_at < ?
                      AND notified = 0
                    """,
                    (self._now(),),
                )
                logger.info("TodoStore migration: marked %s past alerts as notified", cur.rowcount)

            cur.execute("CREATE INDEX IF NOT EXISTS idx_todos_alert_at ON todos(alert_at)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _tags_to_str(tags: list[str] | None) -> str | None:
        if not tags:
            return None
        try:
            return json.dumps([str(t) for t in tags], ensure_ascii=False)
        except Exception:
            logger.exception("Failed to JSON-encode tags; storing NULL.")
            return None

    @staticmethod
    def _str_to_tags(s: str | None) -> list[str]:
        if not s:
            return []
        try:
            val = json.loads(s)
            return [str(v) for v in val] if isinstance(val, list) else []
        except Exception:
            return []

    def _row_to_todo(self, row: sqlite3.Row) -> Todo:
        return Todo(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            category=row["category"],
            priority=int(row["priority"]) if row["priority"] is not None else None,
            tags=self._str_to_tags(row["tags"]),
            due_at=row["due_at"],
            alert_at=row["alert_at"],
            completed=bool(row["completed"]),
            pinned=bool(row["pinned"]),
            notified=bool(row["notified"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            deleted_at=row["deleted_at"],
        )

    def _fetch(self, conn: sqlite3.Connection, todo_id: int) -> Todo | None:
        row = conn.execute("SELECT * FROM todos WHERE id = ?", (int(todo_id),)).fetchone()
        return self._row_to_todo(row) if row else None

    # ---- public API ----

    def count_todos(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM todos WHERE deleted_at IS NULL")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def add_todo(
        self,
        title: str,
        *,
        due: Any = None,
        due_time: str | None = None,
        alert: Any = None,
        category: str | None = None,
        priority: int | None = None,
        tags: list[str] | None = None,
    ) -> Todo:
        """
        Insert a todo.

        due accepts anything timeutil understands. When no explicit alert is given,
        the alert is derived from due (5 minutes earlier), but only if due carries
        a time of day. due_time ("HH:MM") attaches a time to a date-only due.
        """
        if not title or not title.strip():
            raise ValueError("title is required")

        title = title.strip()
        if due_time is not None and due is not None:
            day = to_canonical(due)
            due = combine_date_time(day[:10], due_time) if day else None
        due_at = to_canonical(due)
        alert_at = to_canonical(alert) if alert is not None else derive_alert(due)
        now = self._now()

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO todos(
                    title, category, priority, tags,
                    alert_at, due_at,
                    completed, pinned, notified,
                    created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, 0, 0, 0, ?, ?)
                """,
                (
                    title,
                    category or classify_category(title),
                    priority,
                    self._tags_to_str(tags),
                    alert_at,
                    due_at,
                    now,
                    now,
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for todos insert")
            todo = self._fetch(conn, int(rowid))
            if todo is None:
                raise RuntimeError(f"Todo {rowid} vanished right after insert")
            logger.debug("Todo added id=%s due_at=%s alert_at=%s", todo.id, due_at, alert_at)
            return todo
        finally:
            conn.close()

    def get_todo(self, todo_id: int) -> Todo | None:
        conn = self._get_conn()
        try:
            return self._fetch(conn, todo_id)
        finally:
            conn.close()

    def list_todos(self, *, include_deleted: bool = False) -> list[Todo]:
        """All todos, newest first."""
        where = "" if include_deleted else "WHERE deleted_at IS NULL"
        conn = self._get_conn()
        try:
            rows = conn.execute(f"SELECT * FROM todos {where} ORDER BY created_at DESC, id DESC").fetchall()
            return [self._row_to_todo(r) for r in rows]
        finally:
            conn.close()

    def search_todos(self, query: str) -> list[Todo]:
        term = f"%{query}%"
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT *
                FROM todos
                WHERE deleted_at IS NULL
                  AND (title LIKE ? OR category LIKE ? OR tags LIKE ?)
                ORDER BY created_at DESC, id DESC
                """,
                (term, term, term),
            ).fetchall()
            return [self._row_to_todo(r) for r in rows]
        finally:
            conn.close()

    def list_by_category(self, category: str) -> list[Todo]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT *
                FROM todos
                WHERE deleted_at IS NULL AND category = ?
                ORDER BY created_at DESC, id DESC
                """,
                (category,),
            ).fetchall()
            return [self._row_to_todo(r) for r in rows]
        finally:
            conn.close()

    def update_todo(
        self,
        todo_id: int,
        *,
        title: str | None = None,
        due: Any = None,
        alert: Any = None,
        category: str | None = None,
        priority: int | None = None,
        tags: list[str] | None = None,
        pinned: bool | None = None,
    ) -> Todo | None:
        """
        Partial update; None means "leave unchanged".

        - a new due re-derives alert_at unless alert is given explicitly
        - an unparseable due or alert (e.g. "") clears the field
        - whenever alert_at changes, notified goes back to False so the reminder fires again

        Returns the updated todo, or None if it does not exist.
        """
        conn = self._get_conn()
        try:
            current = self._fetch(conn, todo_id)
            if current is None:
                return None

            fields: list[str] = []
            params: list[Any] = []

            if title is not None:
                if not title.strip():
                    raise ValueError("title must not be empty")
                fields.append("title = ?")
                params.append(title.strip())

            new_alert = current.alert_at
            if due is not None:
                fields.append("due_at = ?")
                params.append(to_canonical(due))
                new_alert = derive_alert(due)
            if alert is not None:
                new_alert = to_canonical(alert)

            if new_alert != current.alert_at:
                fields.append("alert_at = ?")
                params.append(new_alert)
                fields.append("notified = 0")

            if category is not None:
                fields.append("category = ?")
                params.append(category)

            if priority is not None:
                fields.append("priority = ?")
                params.append(int(priority))

            if tags is not None:
                fields.append("tags = ?")
                params.append(self._tags_to_str(tags))

            if pinned is not None:
                fields.append("pinned = ?")
                params.append(1 if pinned else 0)

            if not fields:
                return current

            fields.append("updated_at = ?")
            params.append(self._now())
            params.append(int(todo_id))

            conn.execute(f"UPDATE todos SET {', '.join(fields)} WHERE id = ?", params)
            conn.commit()
            return self._fetch(conn, todo_id)
        finally:
            conn.close()

    def toggle_complete(self, todo_id: int) -> Todo:
        conn = self._get_conn()
        try:
            current = self._fetch(conn, todo_id)
            if current is None:
                raise LookupError(f"Todo {todo_id} not found")
            conn.execute(
                "UPDATE todos SET completed = ?, updated_at = ? WHERE id = ?",
                (0 if current.completed else 1, self._now(), int(todo_id)),
            )
            conn.commit()
            todo = self._fetch(conn, todo_id)
            if todo is None:
                raise LookupError(f"Todo {todo_id} not found")
            return todo
        finally:
            conn.close()

    def delete_todo(self, todo_id: int) -> bool:
        """Soft delete: the row stays, but listings and reminders skip it."""
        now = self._now()
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "UPDATE todos SET deleted_at = ?, updated_at = ? WHERE id = ? AND deleted_at IS NULL",
                (now, now, int(todo_id)),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    # ---- reminder API ----

    def query_due_unnotified(self, now: str, limit: int = 10) -> list[Todo]:
        """
        Reminder candidates at `now` (canonical string).

        A todo is a candidate if:
        - alert_at is set and alert_at <= now (lexical order == time order)
        - not completed, not yet notified, not soft-deleted
        """
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT *
                FROM todos
                WHERE alert_at IS NOT NULL
                  AND alert_at <= ?
                  AND completed = 0
                  AND notified = 0
                  AND deleted_at IS NULL
                ORDER BY id ASC
                    LIMIT ?
                """,
                (str(now), int(limit)),
            ).fetchall()
            return [self._row_to_todo(r) for r in rows]
        finally:
            conn.close()

    def mark_notified(self, todo_id: int) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("UPDATE todos SET notified = 1 WHERE id = ?", (int(todo_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def reset_notified(self, todo_id: int) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("UPDATE todos SET notified = 0 WHERE id = ?", (int(todo_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()
