# ev_crm/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class SortDirection(str, Enum):
    """Направление сортировки колонки."""
    NONE = "none"
    ASC = "asc"
    DESC = "desc"

    def next(self) -> "SortDirection":
        """Следующее состояние цикла none → asc → desc → none."""
        return _SORT_CYCLE[self]


_SORT_CYCLE = {
    SortDirection.NONE: SortDirection.ASC,
    SortDirection.ASC: SortDirection.DESC,
    SortDirection.DESC: SortDirection.NONE,
}


class SortMode(str, Enum):
    """Режим сортировки списка."""
    SINGLE = "single"  # одна активная колонка (жалобы)
    MULTI = "multi"    # цепочка колонок-tie-breaker'ов (водители)


SORT_ICONS = {
    SortDirection.NONE: "↕",
    SortDirection.ASC: "↑",
    SortDirection.DESC: "↓",
}


class ComplaintType(str, Enum):
    """Типы жалоб."""
    SERVICE = "Service"
    GENERAL = "General"
    MAINTENANCE = "Maintenance"

    def __str__(self) -> str:
        return self.value


class ComplaintStatus(str, Enum):
    """Статусы жалоб."""
    PENDING = "Pending"
    COMPLETED = "Completed"
    IN_PROGRESS = "In-Progress"

    def __str__(self) -> str:
        return self.value


# Ключи хранилища сессии в браузере
SESSION_TOKEN_KEY = "authToken"
SESSION_ROLE_KEY = "userRole"

# Обёртка, в которой backend иногда возвращает base64 изображения
WRAPPED_IMAGE_KEY = "changingThisBreaksApplicationSecurity"


class Messages:
    """Тексты для пользователя."""
    FORM_INVALID = "Please fill all required fields correctly!"
    CNIC_REQUIRED = "Please enter CNIC first."
    CNIC_INVALID = "Please enter a valid 13-digit CNIC (XXXXX-XXXXXXX-X)."
    DRIVER_REGISTERED = "Driver Registered Successfully"
    DRIVER_REGISTER_FAILED = "Failed to register driver!"
    COMPLAINT_SUBMITTED = "Complaint submitted successfully!"
    COMPLAINT_SUBMIT_FAILED = "System internal error. Check Base64 image size."
    COMPLAINT_UPDATED = "Complaint updated successfully!"
    COMPLAINT_UPDATE_FAILED = "Failed to update complaint"
    COMPLAINT_DELETED = "Complaint deleted"
    COMPLAINT_DELETE_FAILED = "Failed to delete complaint"
    LOOKUP_FAILED = "Could not fetch driver details. Please try again."
    NO_DATA = "No driver found for this CNIC."
    LOGIN_MISSING = "Please enter both email and password."
    LOGIN_FAILED = "Invalid credentials. Please try again."
    BUSY = "Request already in progress."
    NETWORK_ERROR = "Backend is unreachable."
    LOAD_FAILED = "Failed to load records."
    LOGGED_OUT = "Logged out."
