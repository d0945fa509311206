# src/ai_todolist/todos/category.py

from __future__ import annotations

# Keyword classifier used when a todo is created without a category.
# Order matters: the first matching group wins.
_CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    (
        "health",
        ("운동", "헬스", "health", "walk", "걷기", "조깅", "러닝", "요가", "필라테스", "gym"),
    ),
    (
        "study",
        ("study", "학습", "공부", "과제", "숙제", "시험", "homework", "exam", "lecture"),
    ),
    (
        "self-dev",
        (
            "자기개발",
            "자기 개발",
            "side project",
            "사이드 프로젝트",
            "블로그",
            "독서",
            "책읽기",
            "포트폴리오",
            "blog",
            "reading",
        ),
    ),
    (
        "schedule",
        ("회의", "meeting", "약속", "스케줄", "일정", "세미나", "모임", "appointment"),
    ),
]

DEFAULT_CATEGORY = "etc"
CATEGORIES = tuple(name for name, _ in _CATEGORY_KEYWORDS) + (DEFAULT_CATEGORY,)


def classify_category(title: str, description: str | None = None) -> str:
    text = f"{title or ''} {description or ''}".lower()
    for name, keywords in _CATEGORY_KEYWORDS:
        if any(k in text for k in keywords):
            return name
    return DEFAULT_CATEGORY
