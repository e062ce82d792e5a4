# ev_crm/shared/models/common.py
"""
Общие модели: пагинация, сортировка, авторизация, загруженные файлы.
"""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, Field

from ev_crm.common.constants import SortDirection


class SortDirective(BaseModel):
    """Колонка и направление сортировки."""

    column: str
    direction: SortDirection = SortDirection.NONE


class PageWindow(BaseModel):
    """Окно пагинации."""

    current_page: int = Field(default=1, ge=1, description="Номер страницы")
    page_size: int = Field(default=5, ge=1, description="Размер страницы")
    total_items: int = Field(default=0, ge=0, description="Записей после фильтра")

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size)

    @property
    def offset(self) -> int:
        """Индекс первой записи текущей страницы."""
        return (self.current_page - 1) * self.page_size

    def clamp(self, page: int) -> int:
        """Приводит номер страницы к [1, total_pages] (или 1 при пустом списке)."""
        return max(1, min(page, max(self.total_pages, 1)))


class LoginRequest(BaseModel):
    """Учётные данные сотрудника."""

    username: str
    password: str


class AuthResult(BaseModel):
    """Ответ backend на вход."""

    access_token: str = ""
    role: Optional[str] = None


class UploadedAsset(BaseModel):
    """Файл, закодированный в data URL для отправки в payload."""

    field: str
    data_url: str
    filename: Optional[str] = None
    content_type: str = "application/octet-stream"
