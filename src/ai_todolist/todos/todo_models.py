# src/ai_todolist/todos/todo_models.py

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class Todo:
    """
    One row of the todos table.

    All instants are canonical local-time strings ("YYYY-MM-DD HH:MM"), see timeutil.

    Reminder lifecycle:
    - created with notified=False
    - the reminder scheduler flips notified to True once, right after a successful delivery
    - only an edit of alert_at (or an explicit reset) puts it back to False
    """

    id: int
    title: str

    category: str | None = None
    priority: int | None = None
    tags: list[str] = field(default_factory=list)

    due_at: str | None = None
    alert_at: str | None = None

    completed: bool = False
    pinned: bool = False
    notified: bool = False

    created_at: str | None = None
    updated_at: str | None = None
    deleted_at: str | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
