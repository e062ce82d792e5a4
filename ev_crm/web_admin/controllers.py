# ev_crm/web_admin/controllers.py
"""
Контроллеры экранов консоли.

Связывают gateway, состояние списка и сессии форм. Не зависят от NiceGUI:
страницы вызывают методы контроллера из обработчиков событий и
перерисовывают себя по результату.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from ev_crm.common.constants import Messages, SortMode, TypeMsg
from ev_crm.common.exceptions import GatewayError
from ev_crm.common.logger import log_error, log_info
from ev_crm.config import settings
from ev_crm.core.assets import Content, encode_upload
from ev_crm.core.forms import (
    ComplaintForm,
    DriverRegistrationForm,
    EditResult,
    FormResult,
    FormSession,
    InlineEditSession,
)
from ev_crm.core.roster import RecordListState
from ev_crm.infra.api_clients import CrmClient
from ev_crm.shared.models import ComplaintRecord, DriverRecord, UploadedAsset


async def attach_upload(
    form: FormSession,
    field: str,
    content: Content,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> UploadedAsset:
    """Кодирует загруженный файл и прикрепляет его к форме."""
    asset = await encode_upload(field, content, filename=filename, content_type=content_type)
    form.attach_asset(asset)
    return asset


class LoginController:
    """Вход и выход сотрудника."""

    def __init__(self, gateway: CrmClient) -> None:
        self.gateway = gateway
        self.busy = False

    async def login(self, username: str, password: str) -> FormResult:
        username = (username or "").strip()
        if not username or not password:
            return FormResult(success=False, message=Messages.LOGIN_MISSING)
        if self.busy:
            return FormResult(success=False, message=Messages.BUSY)

        self.busy = True
        try:
            result = await self.gateway.login(username, password)
        except GatewayError as e:
            await log_info(f"Неудачный вход: {username}", type_msg=TypeMsg.WARNING)
            return FormResult(success=False, message=e.user_message(Messages.LOGIN_FAILED))
        finally:
            self.busy = False

        if not result.access_token:
            return FormResult(success=False, message=Messages.LOGIN_FAILED)
        return FormResult(success=True, data=result)

    async def logout(self) -> FormResult:
        await self.gateway.logout()
        return FormResult(success=True, message=Messages.LOGGED_OUT)


class DriverRosterController:
    """Экран водителей: регистрация и список с многоколоночной сортировкой."""

    def __init__(self, gateway: CrmClient) -> None:
        self.gateway = gateway
        self.roster: RecordListState[DriverRecord] = RecordListState(
            search_fields=settings.roster.DRIVER_SEARCH_FIELDS,
            sort_mode=SortMode.MULTI,
        )
        self.form = DriverRegistrationForm(gateway)
        self.error_message: Optional[str] = None
        # жалобы водителя, открытого в окне подробностей
        self.driver_complaints: list[ComplaintRecord] = []

    async def refresh(self) -> bool:
        """Перезапрашивает список водителей. Ошибка оставляет список как есть."""
        try:
            drivers = await self.gateway.get_drivers()
        except GatewayError as e:
            self.error_message = e.user_message(Messages.LOAD_FAILED)
            await log_error(f"Не удалось загрузить водителей: {e.message}")
            return False
        self.error_message = None
        self.roster.load(drivers)
        return True

    async def register(self) -> FormResult:
        result = await self.form.submit()
        if result.refresh:
            await self.refresh()
        return result

    async def upload(self, field: str, content: Content, filename: Optional[str] = None) -> UploadedAsset:
        return await attach_upload(self.form, field, content, filename=filename)

    async def open_details(self, driver: Optional[DriverRecord]) -> None:
        """Открывает карточку водителя вместе с его жалобами."""
        self.roster.select(driver)
        self.driver_complaints = []
        cnic = driver.get("cnic_number") if driver is not None else None
        if not cnic:
            return
        try:
            self.driver_complaints = await self.gateway.get_complaints_by_cnic(str(cnic))
        except GatewayError as e:
            self.error_message = e.user_message(Messages.LOAD_FAILED)


class ComplaintRosterController:
    """Экран жалоб: форма с проверкой CNIC, список, правка строки, удаление."""

    def __init__(self, gateway: CrmClient) -> None:
        self.gateway = gateway
        self.roster: RecordListState[ComplaintRecord] = RecordListState(
            search_fields=settings.roster.COMPLAINT_SEARCH_FIELDS,
            sort_mode=SortMode.SINGLE,
        )
        self.form = ComplaintForm(gateway)
        self.editor = InlineEditSession(gateway.update_complaint)
        self.error_message: Optional[str] = None

    async def refresh(self) -> bool:
        try:
            complaints = await self.gateway.get_complaints()
        except GatewayError as e:
            self.error_message = e.user_message(Messages.LOAD_FAILED)
            await log_error(f"Не удалось загрузить жалобы: {e.message}")
            return False
        self.error_message = None
        self.roster.load(complaints)
        return True

    # === ФОРМА ===

    async def verify_cnic(self, raw_cnic: Optional[str] = None) -> FormResult:
        return await self.form.lookup_identity(raw_cnic)

    async def submit(self) -> FormResult:
        result = await self.form.submit()
        if result.refresh:
            await self.refresh()
        return result

    async def upload(self, field: str, content: Content, filename: Optional[str] = None) -> UploadedAsset:
        return await attach_upload(self.form, field, content, filename=filename)

    # === ПРАВКА СТРОКИ ===

    def begin_edit(self, index: int) -> None:
        items = self.roster.page_items
        self.editor.begin(index, items[index] if 0 <= index < len(items) else None)

    async def cancel_edit(self) -> EditResult:
        result = self.editor.cancel()
        if result.reload:
            await self.refresh()
        return result

    async def commit_edit(self, row: Union[ComplaintRecord, dict[str, Any]]) -> EditResult:
        result = await self.editor.commit(row)
        if result.reload:
            await self.refresh()
        return result

    # === УДАЛЕНИЕ И ПРОСМОТР ===

    async def delete(self, row: Union[ComplaintRecord, dict[str, Any]]) -> FormResult:
        """Удаляет жалобу; тело запроса — сама строка."""
        payload = row.to_payload() if isinstance(row, ComplaintRecord) else dict(row)
        complaint_id = payload.get("complaint_id")
        if complaint_id in (None, ""):
            return FormResult(success=False, message=Messages.COMPLAINT_DELETE_FAILED)
        try:
            await self.gateway.delete_complaint(complaint_id, payload)
        except GatewayError as e:
            await log_error(f"Жалоба {complaint_id}: ошибка удаления ({e.status_code})")
            return FormResult(success=False, message=e.user_message(Messages.COMPLAINT_DELETE_FAILED))

        await log_info(f"Жалоба {complaint_id} удалена")
        await self.refresh()
        return FormResult(success=True, message=Messages.COMPLAINT_DELETED, refresh=True)

    async def open_details(self, complaint_id: Union[str, int]) -> Optional[ComplaintRecord]:
        """Загружает актуальную версию жалобы и делает её выбранной."""
        try:
            complaint = await self.gateway.get_complaint_by_id(complaint_id)
        except GatewayError as e:
            self.error_message = e.user_message(Messages.LOAD_FAILED)
            return None
        self.roster.select(complaint)
        return complaint
