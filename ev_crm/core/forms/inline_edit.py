# ev_crm/core/forms/inline_edit.py
"""
Редактирование одной строки списка жалоб прямо в таблице.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, Union

from ev_crm.common.constants import Messages
from ev_crm.common.exceptions import GatewayError, IdentityFormatError
from ev_crm.common.logger import log_error, log_info
from ev_crm.config import settings
from ev_crm.core.identity import coerce_cnic
from ev_crm.shared.models import Record


Committer = Callable[[Union[str, int], dict[str, Any]], Awaitable[Any]]

INVALID_STATUS_MESSAGE = "Unsupported complaint status."
MISSING_ID_MESSAGE = "Row has no identifier."


@dataclass
class EditResult:
    success: bool
    message: str = ""
    reload: bool = False


class InlineEditSession:
    """
    Активной может быть только одна строка. commit отправляет строку
    целиком через committer(id, payload); при ошибке строка остаётся
    в режиме редактирования.
    """

    def __init__(
        self,
        committer: Committer,
        *,
        id_field: str = "complaint_id",
        cnic_field: str = "driver_cnic",
        status_field: str = "status",
        allowed_statuses: Optional[Iterable[str]] = None,
    ) -> None:
        self._committer = committer
        self.id_field = id_field
        self.cnic_field = cnic_field
        self.status_field = status_field
        self.allowed_statuses = tuple(
            allowed_statuses if allowed_statuses is not None else settings.forms.COMPLAINT_STATUSES
        )
        self.active_index: Optional[int] = None
        # статус строки на момент begin; его можно сохранить без изменений
        self.original_status: Optional[str] = None
        self.busy = False
        self.error_message: Optional[str] = None

    @property
    def is_editing(self) -> bool:
        return self.active_index is not None

    def is_active(self, index: int) -> bool:
        return self.active_index == index

    def begin(self, index: int, row: Union[Record, Mapping[str, Any], None] = None) -> None:
        """Делает строку index активной; предыдущая активная строка снимается."""
        self.active_index = index
        self.error_message = None
        status = row.get(self.status_field) if row is not None else None
        self.original_status = None if status in (None, "") else str(status)

    def cancel(self) -> EditResult:
        """Отмена: несохранённые правки отбрасываются перезагрузкой списка."""
        self.active_index = None
        self.original_status = None
        self.error_message = None
        return EditResult(success=True, reload=True)

    async def commit(self, row: Union[Record, Mapping[str, Any]]) -> EditResult:
        if self.busy:
            return EditResult(success=False, message=Messages.BUSY)

        payload = row.to_payload() if isinstance(row, Record) else dict(row)

        record_id = payload.get(self.id_field)
        if record_id in (None, ""):
            return self._refuse(MISSING_ID_MESSAGE)

        if payload.get(self.cnic_field) not in (None, ""):
            try:
                payload[self.cnic_field] = coerce_cnic(payload[self.cnic_field])
            except IdentityFormatError as e:
                return self._refuse(e.message)

        status = payload.get(self.status_field)
        if status not in (None, "") and not self.status_allowed(str(status)):
            return self._refuse(INVALID_STATUS_MESSAGE)

        self.busy = True
        try:
            await self._committer(record_id, payload)
        except GatewayError as e:
            self.error_message = e.user_message(Messages.COMPLAINT_UPDATE_FAILED)
            await log_error(f"Жалоба {record_id}: ошибка обновления ({e.status_code})")
            return EditResult(success=False, message=self.error_message)
        finally:
            self.busy = False

        await log_info(f"Жалоба {record_id} обновлена")
        self.active_index = None
        self.original_status = None
        self.error_message = None
        return EditResult(success=True, message=Messages.COMPLAINT_UPDATED, reload=True)

    def status_allowed(self, status: str) -> bool:
        """Статус из списка допустимых или неизменённый статус строки."""
        return status in self.allowed_statuses or status == self.original_status

    def _refuse(self, message: str) -> EditResult:
        self.error_message = message
        # строка остаётся активной
        return EditResult(success=False, message=message)
