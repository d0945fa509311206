# src/ai_todolist/llm/client.py

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any

import httpx
import openai
from openai import OpenAI

from ..config import Settings
from ..todos.timeutil import Clock
from .parsing import ParsedTodo, build_system_prompt, safe_parse_json

logger = logging.getLogger(__name__)

_BAD_MODEL_RETRY_SECONDS = 3600.0


def _is_auth_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError))


def _is_rate_limit_error(exc: Exception) -> bool:
    return isinstance(exc, openai.RateLimitError)


def _is_connection_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.APIConnectionError, openai.APITimeoutError))


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError)


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if "API key is not set" in msg:
        return "AI parsing is not configured (missing API key). Set AITODO_OPENAI_API_KEY in .env."
    if "model list is empty" in msg:
        return "AI parsing is not configured (no models). Set AITODO_LLM_MODELS in .env."
    return msg


def build_client(settings: Settings) -> OpenAI:
    """
    Create the OpenAI-compatible client.

    We disable automatic retries so a failing model falls through to the next one quickly.
    """
    api_key = settings.openai_api_key
    if not api_key or not api_key.strip():
        raise RuntimeError("LLM API key is not set. Set AITODO_OPENAI_API_KEY in your .env.")

    timeout_s = float(settings.llm_timeout_seconds)
    return OpenAI(
        api_key=api_key.strip(),
        base_url=(settings.openai_base_url or None),
        timeout=httpx.Timeout(timeout_s, connect=min(5.0, timeout_s)),
        max_retries=0,
    )


class OpenAITodoParser:
    """
    Natural-language todo parser backed by a chat-completions model in JSON mode.

    Behavior:
    - Tries models in the configured order (AITODO_LLM_MODELS).
    - 404 (model not available) -> remember for an hour, try next.
    - Rate limit / network issues -> try next.
    - Auth issues -> stop (no point trying other models with the same key).
    - Any failure ends in None; callers fall back to manual entry.
    """

    def __init__(self, settings: Settings, *, client: Any = None, clock: Clock | None = None) -> None:
        models = [m.strip() for m in settings.llm_models if m and m.strip()]
        if not models:
            raise RuntimeError("LLM model list is empty. Set AITODO_LLM_MODELS in your .env.")
        self._models = models
        self._client = client if client is not None else build_client(settings)
        self._clock = clock or datetime.now
        self._bad_models: dict[str, float] = {}  # model -> retry_at (monotonic)

    def _context(self) -> tuple[str, str]:
        # Local wall clock: a UTC date would be off by one around midnight.
        now = self._clock()
        return now.strftime("%Y-%m-%d"), now.strftime("%H:%M")

    def parse(self, text: str) -> ParsedTodo | None:
        text = (text or "").strip()
        if not text:
            return None

        today, now_time = self._context()
        messages = [
            {"role": "system", "content": build_system_prompt(today, now_time)},
            {"role": "user", "content": text},
        ]

        now = time.monotonic()
        for model in self._models:
            retry_at = self._bad_models.get(model)
            if retry_at is not None and retry_at > now:
                continue

            logger.info("LLM: parsing with model=%s", model)
            try:
                res = self._client.chat.completions.create(
                    model=model,
                    messages=messages,
                    response_format={"type": "json_object"},
                )
            except Exception as e:
                if _is_auth_error(e):
                    logger.error("LLM authentication failed; check AITODO_OPENAI_API_KEY.")
                    return None
                if _is_not_found_error(e):
                    self._bad_models[model] = time.monotonic() + _BAD_MODEL_RETRY_SECONDS
                    logger.info("LLM: model not available (404): %s", model)
                    continue
                if _is_rate_limit_error(e):
                    logger.info("LLM: rate-limited on model=%s, trying next", model)
                    continue
                if _is_connection_error(e):
                    logger.info("LLM: network/timeout error on model=%s, trying next", model)
                    continue
                logger.exception("LLM: unexpected error on model=%s", model)
                continue

            try:
                content = res.choices[0].message.content
            except (AttributeError, IndexError):
                content = None

            if not content:
                logger.info("LLM: empty response from model=%s, trying next", model)
                continue

            parsed = safe_parse_json(content)
            if parsed is not None:
                return parsed

        logger.warning("LLM: all models failed to parse %.80r", text)
        return None
