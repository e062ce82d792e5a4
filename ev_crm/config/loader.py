# ev_crm/config/loader.py
"""
Загрузчик конфигурации консоли.
Единственный источник истины — config/config.json.
Адрес backend, секрет хранилища и порт переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ev_crm.common.constants import ComplaintStatus, ComplaintType


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации."""
    return get_project_root() / "config" / "config.json"


def load_config_json(path: Path | None = None) -> dict[str, Any]:
    """Загружает config.json и возвращает словарь без служебных _comment_ ключей."""
    config_path = path or get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return {k: v for k, v in data.items() if not k.startswith("_comment_")}


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "ev_crm"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "DEBUG"
    LOG_FORMAT: str = "colored"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_MAX_BYTES: int = 10485760

    @field_validator("LOG_FORMAT")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Допустимы только colored и json."""
        if v not in ("colored", "json"):
            raise ValueError(f"Неизвестный формат логов: {v}")
        return v


class BackendSettings(BaseModel):
    """Настройки CRM backend."""
    BACKEND_BASE_URL: str = "http://localhost:5000/neubolt"
    CRM_PREFIX: str = "/crm"
    AUTH_LOGIN_PATH: str = "/auth/login"
    REQUEST_TIMEOUT: float = 30.0

    @field_validator("BACKEND_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class WebAdminSettings(BaseModel):
    """Настройки web консоли (NiceGUI)."""
    HOST: str = "0.0.0.0"
    PORT: int = 8081
    TITLE: str = "EV Fleet CRM"
    STORAGE_SECRET: str = ""

    @field_validator("STORAGE_SECRET", mode="before")
    @classmethod
    def get_from_env(cls, v: str | None) -> str:
        """Получает секрет хранилища из переменных окружения, если не задан."""
        if not v:
            return os.getenv("STORAGE_SECRET", "ev-crm-dev-secret")
        return v


class RosterSettings(BaseModel):
    """Настройки списков (пагинация, поиск, сортировка)."""
    PAGE_SIZE: int = Field(default=5, ge=1)
    DRIVER_SEARCH_FIELDS: list[str] = Field(
        default_factory=lambda: ["name", "cnic_number", "allocated_rikshaw", "contact_number"]
    )
    COMPLAINT_SEARCH_FIELDS: list[str] = Field(
        default_factory=lambda: ["ev_id", "complaint_id", "driver_name", "driver_cnic"]
    )
    DATE_COLUMN_MARKERS: list[str] = Field(default_factory=lambda: ["time", "date", "dob", "_at"])


class FormSettings(BaseModel):
    """Правила валидации форм."""
    CNIC_DIGITS: int = 13
    CONTACT_DIGITS: int = 11
    COMPLAINT_TYPES: list[str] = Field(default_factory=lambda: [t.value for t in ComplaintType])
    COMPLAINT_STATUSES: list[str] = Field(default_factory=lambda: [s.value for s in ComplaintStatus])
    DEFAULT_COMPLAINT_TYPE: str = ComplaintType.GENERAL.value
    TITLE_MAX_LENGTH: int = 100
    DESCRIPTION_MAX_LENGTH: int = 500


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    system: SystemSettings = Field(default_factory=SystemSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)
    web_admin: WebAdminSettings = Field(default_factory=WebAdminSettings)
    roster: RosterSettings = Field(default_factory=RosterSettings)
    forms: FormSettings = Field(default_factory=FormSettings)

    @classmethod
    def from_config_json(cls, path: Path | None = None) -> "Settings":
        """
        Создаёт объект Settings из config.json.
        Значения окружения имеют приоритет над файлом.
        """
        data = load_config_json(path)
        roster_defaults = RosterSettings()
        forms_defaults = FormSettings()

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "ev_crm"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", True),
                ENVIRONMENT=os.getenv("ENVIRONMENT", data.get("ENVIRONMENT", "development")),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=os.getenv("LOG_LEVEL", data.get("LOG_LEVEL", "DEBUG")),
                LOG_FORMAT=data.get("LOG_FORMAT", "colored"),
                LOG_TO_FILE=data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
            ),
            backend=BackendSettings(
                BACKEND_BASE_URL=os.getenv(
                    "BACKEND_BASE_URL", data.get("BACKEND_BASE_URL", "http://localhost:5000/neubolt")
                ),
                CRM_PREFIX=data.get("CRM_PREFIX", "/crm"),
                AUTH_LOGIN_PATH=data.get("AUTH_LOGIN_PATH", "/auth/login"),
                REQUEST_TIMEOUT=data.get("REQUEST_TIMEOUT", 30.0),
            ),
            web_admin=WebAdminSettings(
                HOST=data.get("WEB_ADMIN_HOST", "0.0.0.0"),
                PORT=int(os.getenv("WEB_ADMIN_PORT", data.get("WEB_ADMIN_PORT", 8081))),
                TITLE=data.get("WEB_ADMIN_TITLE", "EV Fleet CRM"),
                STORAGE_SECRET=os.getenv("STORAGE_SECRET", data.get("STORAGE_SECRET", "")),
            ),
            roster=RosterSettings(
                PAGE_SIZE=data.get("PAGE_SIZE", 5),
                DRIVER_SEARCH_FIELDS=data.get("DRIVER_SEARCH_FIELDS", roster_defaults.DRIVER_SEARCH_FIELDS),
                COMPLAINT_SEARCH_FIELDS=data.get(
                    "COMPLAINT_SEARCH_FIELDS", roster_defaults.COMPLAINT_SEARCH_FIELDS
                ),
                DATE_COLUMN_MARKERS=data.get("DATE_COLUMN_MARKERS", roster_defaults.DATE_COLUMN_MARKERS),
            ),
            forms=FormSettings(
                CNIC_DIGITS=data.get("CNIC_DIGITS", 13),
                CONTACT_DIGITS=data.get("CONTACT_DIGITS", 11),
                COMPLAINT_TYPES=data.get("COMPLAINT_TYPES", forms_defaults.COMPLAINT_TYPES),
                COMPLAINT_STATUSES=data.get("COMPLAINT_STATUSES", forms_defaults.COMPLAINT_STATUSES),
                DEFAULT_COMPLAINT_TYPE=data.get("DEFAULT_COMPLAINT_TYPE", forms_defaults.DEFAULT_COMPLAINT_TYPE),
                TITLE_MAX_LENGTH=data.get("TITLE_MAX_LENGTH", 100),
                DESCRIPTION_MAX_LENGTH=data.get("DESCRIPTION_MAX_LENGTH", 500),
            ),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Без config.json используются значения по умолчанию.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    try:
        return Settings.from_config_json()
    except FileNotFoundError:
        return Settings()


# Экспорт синглтона для удобного импорта
settings = get_settings()
