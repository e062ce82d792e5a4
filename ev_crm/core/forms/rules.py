# ev_crm/core/forms/rules.py
"""
Правила валидации полей формы.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class FieldRule:
    """Правило поля: обязательность, шаблон, длина, число цифр, допустимые значения."""

    required: bool = False
    pattern: Optional[str] = None
    max_length: Optional[int] = None
    digits: Optional[int] = None
    choices: Optional[tuple[str, ...]] = None

    def check(self, value: Any) -> list[str]:
        """Возвращает коды нарушенных правил (пустой список — поле валидно)."""
        text = "" if value is None else str(value).strip()
        if not text:
            return ["required"] if self.required else []

        errors: list[str] = []
        if self.pattern and not re.fullmatch(self.pattern, text):
            errors.append("pattern")
        if self.max_length is not None and len(text) > self.max_length:
            errors.append("maxlength")
        if self.digits is not None and not (text.isdigit() and len(text) == self.digits):
            errors.append("digits")
        if self.choices is not None and text not in self.choices:
            errors.append("choice")
        return errors


@dataclass
class FieldState:
    """Текущее состояние поля."""

    value: Any = ""
    errors: list[str] = field(default_factory=list)
    touched: bool = False

    @property
    def valid(self) -> bool:
        return not self.errors


ERROR_TEXTS = {
    "required": "This field is required.",
    "pattern": "Invalid format.",
    "maxlength": "Value is too long.",
    "digits": "Wrong number of digits.",
    "choice": "Unsupported value.",
}


def describe(code: str) -> str:
    """Текст ошибки для отображения под полем."""
    return ERROR_TEXTS.get(code, code)
