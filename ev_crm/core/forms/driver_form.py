# ev_crm/core/forms/driver_form.py
"""
Форма регистрации водителя.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ev_crm.common.constants import Messages
from ev_crm.config import settings
from ev_crm.core.forms.rules import FieldRule
from ev_crm.core.forms.session import FormSession

if TYPE_CHECKING:
    from ev_crm.infra.api_clients import CrmClient


# Поля для загрузки файлов (фото водителя и документы)
DRIVER_ASSET_FIELDS = ("driver_image", "cnic_front", "cnic_back", "license_image")


def driver_registration_rules() -> dict[str, FieldRule]:
    forms = settings.forms
    return {
        "name": FieldRule(required=True),
        "contact_number": FieldRule(required=True, digits=forms.CONTACT_DIGITS),
        "dob": FieldRule(required=True),
        "current_address": FieldRule(required=True),
        "allocated_rikshaw": FieldRule(),
        "cnic_number": FieldRule(required=True, digits=forms.CNIC_DIGITS),
    }


class DriverRegistrationForm(FormSession):
    """Регистрация водителя: POST /ev_drivers. driver_id и registered_at назначает backend."""

    def __init__(self, gateway: "CrmClient") -> None:
        super().__init__(
            driver_registration_rules(),
            gateway.post_driver,
            free_text_fields=("name", "current_address"),
            success_message=Messages.DRIVER_REGISTERED,
            failure_message=Messages.DRIVER_REGISTER_FAILED,
            name="driver_registration",
        )
