# ev_crm/shared/models/records.py
"""
Типизированные записи backend (водители, жалобы, данные по CNIC).

Все известные колонки необязательны, неизвестные поля backend сохраняются
(extra="allow") и проходят обратно при обновлении записи.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from ev_crm.common.text import unwrap_image


Scalar = Union[int, float, str]


class Record(BaseModel):
    """Базовая запись списка с доступом к полям по имени."""

    model_config = ConfigDict(extra="allow")

    def get(self, name: str, default: Any = None) -> Any:
        """Значение колонки по имени (в т.ч. неизвестной модели)."""
        if name in type(self).model_fields:
            value = getattr(self, name)
            return default if value is None else value
        return (self.model_extra or {}).get(name, default)

    def set(self, name: str, value: Any) -> None:
        """Устанавливает значение колонки по имени."""
        setattr(self, name, value)

    def to_payload(self) -> dict[str, Any]:
        """Поля, пришедшие с backend (или изменённые), включая неизвестные модели."""
        return self.model_dump(mode="json", exclude_unset=True)


class DriverRecord(Record):
    """Водитель электро-рикши."""

    driver_id: Optional[Scalar] = None
    name: Optional[str] = None
    contact_number: Optional[Scalar] = None
    dob: Optional[str] = None
    current_address: Optional[str] = None
    allocated_rikshaw: Optional[Scalar] = None
    cnic_number: Optional[Scalar] = None
    registered_at: Optional[str] = None
    driver_image: Optional[str] = None

    @field_validator("driver_image", mode="before")
    @classmethod
    def unwrap(cls, v: Any) -> str | None:
        return unwrap_image(v) or None


class ComplaintRecord(Record):
    """Жалоба по паре водитель/транспорт."""

    complaint_id: Optional[Scalar] = None
    complaint_name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None
    driver_name: Optional[str] = None
    driver_cnic: Optional[Scalar] = None
    driver_number: Optional[Scalar] = None
    phone_no: Optional[Scalar] = None
    ev_id: Optional[Scalar] = None
    complaint_register_time: Optional[str] = None
    status_change_time: Optional[str] = None
    driver_image: Optional[str] = None

    @field_validator("driver_image", mode="before")
    @classmethod
    def unwrap(cls, v: Any) -> str | None:
        return unwrap_image(v) or None


class IdentityDetails(Record):
    """Ответ backend на поиск водителя по CNIC."""

    name: Optional[str] = None
    contact_number: Optional[Scalar] = None
    allocated_rikshaw: Optional[Scalar] = None
    current_address: Optional[str] = None
    cnic_number: Optional[Scalar] = None
    driver_image: Optional[str] = None

    @field_validator("driver_image", mode="before")
    @classmethod
    def unwrap(cls, v: Any) -> str | None:
        return unwrap_image(v) or None
