# ev_crm/core/forms/session.py
"""
Сессия формы создания записи.

Хранит значения полей и их валидность, собирает payload (свободный текст
экранируется, загруженные файлы подмешиваются) и отправляет его через
переданную корутину gateway.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional

from ev_crm.common.constants import Messages
from ev_crm.common.exceptions import GatewayError
from ev_crm.common.logger import log_error, log_info, log_warning
from ev_crm.common.text import escape_html
from ev_crm.core.forms.rules import FieldRule, FieldState
from ev_crm.shared.models import UploadedAsset


Sender = Callable[[dict[str, Any]], Awaitable[Any]]


@dataclass
class FormResult:
    """Итог операции формы для экрана."""

    success: bool
    message: str = ""
    errors: dict[str, list[str]] = field(default_factory=dict)
    refresh: bool = False
    data: Any = None


class FormSession:
    """Значения, валидность и жизненный цикл отправки одной формы."""

    def __init__(
        self,
        rules: Mapping[str, FieldRule],
        sender: Sender,
        *,
        defaults: Optional[Mapping[str, Any]] = None,
        free_text_fields: Iterable[str] = (),
        success_message: str = "",
        failure_message: str = "",
        name: str = "form",
    ) -> None:
        self.rules = dict(rules)
        self.defaults = dict(defaults or {})
        self.free_text_fields = frozenset(free_text_fields)
        self.success_message = success_message
        self.failure_message = failure_message
        self.name = name
        self._sender = sender

        self.fields: dict[str, FieldState] = {}
        self.assets: dict[str, UploadedAsset] = {}
        self.busy = False
        self.error_message: Optional[str] = None

        self.initialize(self.defaults)

    # =========================================================================
    # ПОЛЯ
    # =========================================================================

    def initialize(self, defaults: Optional[Mapping[str, Any]] = None) -> None:
        """Заполняет поля значениями по умолчанию и снимает флаги touched."""
        seed = dict(defaults if defaults is not None else self.defaults)
        self.fields = {}
        for name, rule in self.rules.items():
            value = seed.get(name, "")
            self.fields[name] = FieldState(value=value, errors=rule.check(value))
        self.error_message = None

    def set_field(self, name: str, value: Any) -> FieldState:
        """Меняет значение и пересчитывает валидность поля."""
        if name not in self.fields:
            raise KeyError(f"Неизвестное поле формы {self.name}: {name}")
        state = self.fields[name]
        state.value = value
        state.errors = self.rules[name].check(value)
        return state

    def touch(self, name: str) -> None:
        self.fields[name].touched = True

    def value(self, name: str) -> Any:
        return self.fields[name].value

    @property
    def values(self) -> dict[str, Any]:
        return {name: state.value for name, state in self.fields.items()}

    @property
    def errors(self) -> dict[str, list[str]]:
        return {name: list(state.errors) for name, state in self.fields.items() if state.errors}

    @property
    def is_valid(self) -> bool:
        return all(state.valid for state in self.fields.values())

    def validate_all(self) -> bool:
        """Проверяет все поля и помечает их touched; значения не меняются."""
        for name, state in self.fields.items():
            state.errors = self.rules[name].check(state.value)
            state.touched = True
        return self.is_valid

    # =========================================================================
    # ФАЙЛЫ
    # =========================================================================

    def attach_asset(self, asset: UploadedAsset) -> None:
        """Запоминает закодированный файл; на валидность формы не влияет."""
        self.assets[asset.field] = asset

    def detach_asset(self, field_name: str) -> None:
        self.assets.pop(field_name, None)

    # =========================================================================
    # ОТПРАВКА
    # =========================================================================

    def clean_value(self, name: str) -> Any:
        value = self.fields[name].value
        if name in self.free_text_fields:
            return escape_html(value)
        if isinstance(value, str):
            return value.strip()
        return value

    def build_payload(self) -> dict[str, Any]:
        """Очищенные значения полей + data URL загруженных файлов."""
        payload = {name: self.clean_value(name) for name in self.fields}
        payload.update({name: asset.data_url for name, asset in self.assets.items()})
        return payload

    def reset(self) -> None:
        self.initialize(self.defaults)
        self.assets = {}

    async def submit(self) -> FormResult:
        """
        Отправляет форму.

        Невалидная форма до сети не доходит. При успехе сессия сбрасывается,
        а результат просит экран обновить список.
        """
        if self.busy:
            return FormResult(success=False, message=Messages.BUSY)

        if not self.validate_all():
            await log_warning(
                f"Форма {self.name} не прошла валидацию",
                extra={"fields": sorted(self.errors)},
            )
            return FormResult(success=False, message=Messages.FORM_INVALID, errors=self.errors)

        payload = self.build_payload()
        self.busy = True
        try:
            data = await self._sender(payload)
        except GatewayError as e:
            self.error_message = e.user_message(self.failure_message)
            await log_error(f"Форма {self.name}: ошибка отправки ({e.status_code}) {e.message}")
            return FormResult(success=False, message=self.error_message)
        finally:
            self.busy = False

        await log_info(f"Форма {self.name} отправлена")
        self.reset()
        return FormResult(success=True, message=self.success_message, refresh=True, data=data)
