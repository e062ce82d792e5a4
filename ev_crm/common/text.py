# ev_crm/common/text.py
"""
Очистка пользовательского текста перед отправкой и отображением.
"""

from __future__ import annotations

import html
import re
from typing import Any

from ev_crm.common.constants import WRAPPED_IMAGE_KEY


_TAG_RE = re.compile(r"<[^>]*>")
_MARKUP_CHARS_RE = re.compile(r"[<>\"'`&]")
_SPACES_RE = re.compile(r"\s+")
_NON_DIGITS_RE = re.compile(r"\D")


def escape_html(value: Any) -> str:
    """
    Экранирует &, < и > в свободном тексте.
    Пустое значение превращается в пустую строку.
    """
    if value is None or value == "":
        return ""
    return html.escape(str(value), quote=False).strip()


def sanitize_query(query: str | None) -> str:
    """
    Очищает поисковый запрос: убирает теги и символы разметки,
    схлопывает пробелы.
    """
    if not query:
        return ""
    cleaned = _TAG_RE.sub("", str(query))
    cleaned = _MARKUP_CHARS_RE.sub("", cleaned)
    return _SPACES_RE.sub(" ", cleaned).strip()


def digits_only(value: Any) -> str:
    """Оставляет в значении только цифры."""
    if value is None:
        return ""
    return _NON_DIGITS_RE.sub("", str(value))


def unwrap_image(value: Any) -> str:
    """
    Достаёт строку изображения из обёртки {WRAPPED_IMAGE_KEY: "..."},
    в которой backend иногда хранит base64.
    """
    if not value:
        return ""
    if isinstance(value, dict):
        inner = value.get(WRAPPED_IMAGE_KEY)
        return inner if isinstance(inner, str) else ""
    return str(value)
