# ev_crm/common/exceptions.py
"""
Исключения консоли.

Иерархия:
- CrmError — база, содержит сообщение для пользователя
- FormValidationError — локальная ошибка валидации, до сети не доходит
- IdentityFormatError — CNIC не приводится к 13 цифрам
- GatewayError — non-2xx ответ backend или сетевая ошибка
"""

from __future__ import annotations


class CrmError(Exception):
    """Базовая ошибка консоли."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FormValidationError(CrmError):
    """Ошибка валидации полей формы."""

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or {}


class IdentityFormatError(FormValidationError):
    """Номер CNIC имеет неверный формат."""


class GatewayError(CrmError):
    """Ошибка обращения к backend."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        backend_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.backend_message = backend_message

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    def user_message(self, fallback: str) -> str:
        """Сообщение backend, если оно есть, иначе fallback."""
        return self.backend_message or fallback
