# ev_crm/core/forms/complaint_form.py
"""
Форма новой жалобы с проверкой водителя по CNIC.

Проверка CNIC заполняет имя, телефон, номер транспорта и фото водителя
из ответа backend и сохраняет карточку водителя для показа.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from ev_crm.common.constants import Messages, TypeMsg
from ev_crm.common.exceptions import GatewayError, IdentityFormatError
from ev_crm.common.logger import log_info
from ev_crm.common.text import escape_html, unwrap_image
from ev_crm.config import settings
from ev_crm.core.forms.rules import FieldRule
from ev_crm.core.forms.session import FormResult, FormSession
from ev_crm.core.identity import normalize_cnic
from ev_crm.shared.models import IdentityDetails

if TYPE_CHECKING:
    from ev_crm.infra.api_clients import CrmClient


# поле формы → поле ответа backend
DEPENDENT_FIELDS = {
    "driver_name": "name",
    "phone_no": "contact_number",
    "ev_id": "allocated_rikshaw",
    "driver_image": "driver_image",
}


def complaint_rules() -> dict[str, FieldRule]:
    forms = settings.forms
    return {
        "cnic": FieldRule(required=True, pattern=r"\d{5}-?\d{7}-?\d"),
        "driver_name": FieldRule(required=True, pattern=r"[A-Za-z ]{3,50}"),
        "phone_no": FieldRule(required=True, digits=forms.CONTACT_DIGITS),
        "ev_id": FieldRule(required=True),
        "maintenance_type": FieldRule(required=True, choices=tuple(forms.COMPLAINT_TYPES)),
        "title": FieldRule(required=True, max_length=forms.TITLE_MAX_LENGTH),
        "description": FieldRule(required=True, max_length=forms.DESCRIPTION_MAX_LENGTH),
        "driver_image": FieldRule(),
    }


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


class ComplaintForm(FormSession):
    """Форма жалобы: проверка CNIC + POST /crm/complaints."""

    def __init__(self, gateway: "CrmClient") -> None:
        self.gateway = gateway
        self.driver_details: Optional[IdentityDetails] = None
        self.no_data_found = False
        self.lookup_failed = False
        super().__init__(
            complaint_rules(),
            gateway.post_complaint,
            defaults={"maintenance_type": settings.forms.DEFAULT_COMPLAINT_TYPE},
            free_text_fields=("driver_name", "title", "description"),
            success_message=Messages.COMPLAINT_SUBMITTED,
            failure_message=Messages.COMPLAINT_SUBMIT_FAILED,
            name="complaint",
        )

    def reset(self) -> None:
        super().reset()
        self.driver_details = None
        self.no_data_found = False
        self.lookup_failed = False

    def _clear_dependents(self) -> None:
        for name in DEPENDENT_FIELDS:
            self.set_field(name, "")
        # фото прежнего водителя не должно уйти с новой жалобой
        self.detach_asset("driver_image")

    async def lookup_identity(self, raw_cnic: Optional[str] = None) -> FormResult:
        """
        Ищет водителя по CNIC и заполняет зависимые поля.

        Неверный формат — отказ без запроса. Пустой ответ — зависимые поля
        очищаются (вместе с загруженным фото) и ставится no_data_found. Ошибка сети — lookup_failed,
        значения полей не меняются.
        """
        raw = raw_cnic if raw_cnic is not None else self.value("cnic")
        self.no_data_found = False
        self.lookup_failed = False
        try:
            cnic = normalize_cnic(raw)
        except IdentityFormatError as e:
            return FormResult(success=False, message=e.message, errors=e.errors)

        try:
            details = await self.gateway.get_driver_details(cnic)
        except GatewayError as e:
            self.lookup_failed = True
            await log_info(f"Проверка CNIC: ошибка backend ({e.status_code})", type_msg=TypeMsg.WARNING)
            return FormResult(success=False, message=e.user_message(Messages.LOOKUP_FAILED))

        if details is None:
            self._clear_dependents()
            self.driver_details = None
            self.no_data_found = True
            await log_info("Проверка CNIC: водитель не найден", type_msg=TypeMsg.DEBUG)
            return FormResult(success=False, message=Messages.NO_DATA)

        for form_field, source_field in DEPENDENT_FIELDS.items():
            self.set_field(form_field, _as_text(details.get(source_field)))
        self.driver_details = details
        await log_info("Проверка CNIC: данные водителя получены", type_msg=TypeMsg.DEBUG)
        return FormResult(success=True, data=details)

    def build_payload(self) -> dict[str, Any]:
        phone = self.clean_value("phone_no")
        image = self.assets["driver_image"].data_url if "driver_image" in self.assets else None
        return {
            "driver_cnic": normalize_cnic(self.value("cnic")),
            "driver_name": self.clean_value("driver_name"),
            # backend читает номер под обоими ключами
            "driver_number": phone,
            "phone_no": phone,
            "ev_id": self.clean_value("ev_id"),
            "driver_image": image or unwrap_image(self.value("driver_image")),
            "complaint_name": escape_html(self.value("title")),
            "description": escape_html(self.value("description")),
            "type": self.clean_value("maintenance_type"),
        }
