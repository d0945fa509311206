# src/ai_todolist/llm/offline.py

from __future__ import annotations

from ..todos.category import classify_category
from .parsing import ParsedTodo


class OfflineTodoParser:
    """
    Offline deterministic parser used when no external API is configured.

    The whole line becomes the title, the category comes from the keyword classifier,
    and no date/time is guessed.
    """

    def parse(self, text: str) -> ParsedTodo | None:
        title = (text or "").strip()
        if not title:
            return None
        return ParsedTodo(title=title, category=classify_category(title))
