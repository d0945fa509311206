# src/ai_todolist/llm/parsing.py

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from ..todos.category import CATEGORIES

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ParsedTodo:
    """Structured suggestion for one free-text todo line. Every field may be missing."""

    title: str | None
    category: str | None = None
    date: str | None = None  # "YYYY-MM-DD"
    time: str | None = None  # "HH:MM"
    condition: str | None = None


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def safe_parse_json(raw: Any) -> ParsedTodo | None:
    """
    Accept a JSON string or an already-decoded dict and build a ParsedTodo.

    Returns None for invalid JSON or non-object payloads.
    """
    parsed = raw
    if isinstance(raw, (str, bytes)):
        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("LLM returned invalid JSON: %.200r", raw)
            return None

    if not isinstance(parsed, dict):
        logger.warning("LLM returned a non-object payload: %.200r", parsed)
        return None

    category = _opt_str(parsed.get("category"))
    if category is not None and category not in CATEGORIES:
        category = None

    return ParsedTodo(
        title=_opt_str(parsed.get("title")),
        category=category,
        date=_opt_str(parsed.get("date")),
        time=_opt_str(parsed.get("time")),
        condition=_opt_str(parsed.get("condition")),
    )


def build_system_prompt(today: str, now_time: str) -> str:
    categories = ", ".join(f'"{c}"' for c in CATEGORIES)
    return f"""
You are an AI that parses short TODO sentences (Korean or English) into structured JSON.

CURRENT CONTEXT:
- today_date: "{today}"
- now_time: "{now_time}"

RULES:
1. Always output valid JSON only. No explanations, no extra text.
2. Extract only explicitly stated information.
3. Relative expressions ("in an hour", "30분 후", "2시간 뒤") are calculated from now_time.
4. Convert all time expressions ("11시", "3시 반", "3pm") into 24-hour HH:MM.
5. If the date is ambiguous ("today", "오늘", "지금"), use today_date.
6. If the date is relative ("tomorrow", "내일", "모레", "next Friday"), compute the exact
   YYYY-MM-DD from today_date.
7. If the time cannot be determined, set time to null.
8. Keep the title concise (2 to 7 words).
9. category is one of: {categories}. Use "etc" when nothing fits.
10. Conditional tasks ("출근 전에 커피 사기", "do laundry when I get home"):
    date = today_date, time = null, condition = the original condition phrase.

OUTPUT JSON FORMAT:
{{
  "title": string,
  "category": string,
  "date": "YYYY-MM-DD" | null,
  "time": "HH:MM" | null,
  "condition": string | null
}}
""".strip()
