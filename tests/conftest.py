# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("STORAGE_SECRET", "test_storage_secret")
os.environ.setdefault("ENVIRONMENT", "test")

from ev_crm.infra.api_clients import CrmClient
from ev_crm.infra.session_store import MemorySessionStore
from ev_crm.shared.models import ComplaintRecord, DriverRecord


TEST_BASE_URL = "http://backend.test/neubolt"

DRIVER_NAMES = [
    "Lena", "Bilal", "Kamran", "Ali", "Zara", "Fahad",
    "Hina", "Omar", "Dawood", "Javed", "Ibrahim", "Saima",
]


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "_comment_system": "Системные настройки",
        "PROJECT_NAME": "ev_crm_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "json",
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "BACKEND_BASE_URL": "http://backend.test/neubolt/",
        "CRM_PREFIX": "/crm",
        "AUTH_LOGIN_PATH": "/auth/login",
        "REQUEST_TIMEOUT": 5,
        "WEB_ADMIN_HOST": "127.0.0.1",
        "WEB_ADMIN_PORT": 9000,
        "WEB_ADMIN_TITLE": "EV CRM Test",
        "PAGE_SIZE": 10,
        "CNIC_DIGITS": 13,
        "CONTACT_DIGITS": 11,
        "DEFAULT_COMPLAINT_TYPE": "Service",
    }


@pytest.fixture
def config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Временный config.json."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps(mock_config), encoding="utf-8")
    return path


# =============================================================================
# ФИКСТУРЫ ЗАПИСЕЙ
# =============================================================================

@pytest.fixture
def sample_driver_rows() -> list[dict[str, Any]]:
    """12 водителей в порядке ответа backend."""
    return [
        {
            "driver_id": index + 1,
            "name": name,
            "contact_number": f"0300{index:07d}",
            "dob": f"199{index % 10}-0{index % 9 + 1}-15",
            "current_address": f"Street {index + 1}, Lahore",
            "allocated_rikshaw": f"EV-{(index % 4) + 1:03d}",
            "cnic_number": f"35202{index:08d}",
            "registered_at": f"2024-03-{index + 1:02d}T10:00:00Z",
        }
        for index, name in enumerate(DRIVER_NAMES)
    ]


@pytest.fixture
def sample_drivers(sample_driver_rows: list[dict[str, Any]]) -> list[DriverRecord]:
    return [DriverRecord.model_validate(row) for row in sample_driver_rows]


@pytest.fixture
def sample_complaint_rows() -> list[dict[str, Any]]:
    return [
        {
            "complaint_id": 101,
            "complaint_name": "Brake noise",
            "description": "Front brake squeaks",
            "status": "Pending",
            "type": "Maintenance",
            "driver_name": "Ali",
            "driver_cnic": "3520200000003",
            "driver_number": "03000000003",
            "ev_id": "EV-004",
            "complaint_register_time": "2024-05-02T09:00:00Z",
        },
        {
            "complaint_id": 102,
            "complaint_name": "Battery drains",
            "description": "Range below 40 km",
            "status": "In-Progress",
            "type": "Service",
            "driver_name": "Bilal",
            "driver_cnic": "3520200000001",
            "driver_number": "03000000001",
            "ev_id": "EV-002",
            "complaint_register_time": "Wed, 01 May 2024 08:00:00 GMT",
        },
        {
            "complaint_id": 103,
            "complaint_name": "Mirror broken",
            "description": "Left mirror",
            "status": "Completed",
            "type": "General",
            "driver_name": "Kamran",
            "driver_cnic": "3520200000002",
            "driver_number": "03000000002",
            "ev_id": "EV-003",
            "complaint_register_time": "not a date",
            "depot": "North",
        },
    ]


@pytest.fixture
def sample_complaints(sample_complaint_rows: list[dict[str, Any]]) -> list[ComplaintRecord]:
    return [ComplaintRecord.model_validate(row) for row in sample_complaint_rows]


@pytest.fixture
def identity_payload() -> dict[str, Any]:
    """Ответ backend на поиск по CNIC."""
    return {
        "name": "Ali Raza",
        "contact_number": "03001234567",
        "allocated_rikshaw": "EV-042",
        "current_address": "Model Town, Lahore",
        "cnic_number": "1234512345671",
        "driver_image": {"changingThisBreaksApplicationSecurity": "data:image/png;base64,AAAA"},
    }


# =============================================================================
# ФИКСТУРЫ GATEWAY
# =============================================================================

@pytest.fixture
def mock_gateway() -> MagicMock:
    """Мок CrmClient: все вызовы backend — AsyncMock."""
    gateway = MagicMock(spec=CrmClient)
    gateway.login = AsyncMock()
    gateway.logout = AsyncMock()
    gateway.get_driver_details = AsyncMock(return_value=None)
    gateway.get_drivers = AsyncMock(return_value=[])
    gateway.post_driver = AsyncMock(return_value={"message": "ok"})
    gateway.get_complaints = AsyncMock(return_value=[])
    gateway.get_complaint_by_id = AsyncMock(return_value=None)
    gateway.get_complaints_by_cnic = AsyncMock(return_value=[])
    gateway.post_complaint = AsyncMock(return_value={"message": "ok"})
    gateway.update_complaint = AsyncMock(return_value={"message": "ok"})
    gateway.delete_complaint = AsyncMock(return_value={"message": "ok"})
    return gateway


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def make_client(session_store: MemorySessionStore) -> Callable[..., CrmClient]:
    """
    Фабрика CrmClient поверх httpx.MockTransport.

    handler получает httpx.Request и возвращает httpx.Response.
    """
    def factory(handler: Callable[[httpx.Request], httpx.Response], session: Any = None) -> CrmClient:
        return CrmClient(
            session if session is not None else session_store,
            base_url=TEST_BASE_URL,
            transport=httpx.MockTransport(handler),
        )

    return factory
