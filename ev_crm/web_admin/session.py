# ev_crm/web_admin/session.py
"""
Сессия сотрудника в браузере и gateway на время жизни страницы.
"""

from __future__ import annotations

from nicegui import app, ui

from ev_crm.infra.api_clients import CrmClient
from ev_crm.infra.session_store import StorageSessionStore


def current_session() -> StorageSessionStore:
    """Токен и роль из app.storage.user (хранится между перезагрузками)."""
    return StorageSessionStore(app.storage.user)


def page_gateway() -> CrmClient:
    """CrmClient текущей вкладки; закрывается при отключении клиента."""
    gateway = CrmClient(current_session())
    ui.context.client.on_disconnect(gateway.close)
    return gateway


def require_login() -> bool:
    """Без токена отправляет на страницу входа."""
    if current_session().is_authenticated:
        return True
    ui.navigate.to("/login")
    return False
