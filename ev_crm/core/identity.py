# ev_crm/core/identity.py
"""
Нормализация номера CNIC (национальный ID водителя).
Backend принимает CNIC только как строку из 13 цифр без разделителей.
"""

from __future__ import annotations

import re
from typing import Any

from ev_crm.common.constants import Messages
from ev_crm.common.exceptions import IdentityFormatError
from ev_crm.common.text import digits_only
from ev_crm.config import settings


_FORMATTING_RE = re.compile(r"[\s\-]")


def _expected_digits(digits: int | None) -> int:
    return digits or settings.forms.CNIC_DIGITS


def normalize_cnic(value: Any, digits: int | None = None) -> str:
    """
    Убирает разделители (дефисы, пробелы) и проверяет длину.

    Raises:
        IdentityFormatError: пустое значение или не ровно N цифр
    """
    count = _expected_digits(digits)
    raw = "" if value is None else str(value).strip()
    if not raw:
        raise IdentityFormatError(Messages.CNIC_REQUIRED, {"cnic": ["required"]})

    normalized = _FORMATTING_RE.sub("", raw)
    if not re.fullmatch(rf"\d{{{count}}}", normalized):
        raise IdentityFormatError(Messages.CNIC_INVALID, {"cnic": ["pattern"]})
    return normalized


def coerce_cnic(value: Any, digits: int | None = None) -> str:
    """
    Оставляет только цифры и обрезает до N.
    Меньше N цифр — IdentityFormatError.
    """
    count = _expected_digits(digits)
    cleaned = digits_only(value)[:count]
    if len(cleaned) != count:
        raise IdentityFormatError(Messages.CNIC_INVALID, {"driver_cnic": ["pattern"]})
    return cleaned


def is_valid_cnic(value: Any, digits: int | None = None) -> bool:
    try:
        normalize_cnic(value, digits)
    except IdentityFormatError:
        return False
    return True
