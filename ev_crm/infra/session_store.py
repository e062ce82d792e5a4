# ev_crm/infra/session_store.py
"""
Хранение токена сессии сотрудника.

Gateway зависит только от протокола SessionContext, поэтому в тестах
используется MemorySessionStore, а в консоли — StorageSessionStore поверх
app.storage.user из NiceGUI (долговременное хранилище браузера).
"""

from __future__ import annotations

from typing import Any, MutableMapping, Optional, Protocol, runtime_checkable

from ev_crm.common.constants import SESSION_ROLE_KEY, SESSION_TOKEN_KEY


@runtime_checkable
class SessionContext(Protocol):
    """Источник bearer-токена для запросов к backend."""

    @property
    def token(self) -> Optional[str]: ...

    @property
    def role(self) -> Optional[str]: ...

    def save(self, token: str, role: Optional[str] = None) -> None: ...

    def clear(self) -> None: ...


class StorageSessionStore:
    """Сессия поверх произвольного словаря-хранилища."""

    def __init__(self, storage: MutableMapping[str, Any]) -> None:
        self._storage = storage

    @property
    def token(self) -> Optional[str]:
        # пустая строка считается отсутствием токена
        return self._storage.get(SESSION_TOKEN_KEY) or None

    @property
    def role(self) -> Optional[str]:
        return self._storage.get(SESSION_ROLE_KEY) or None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def save(self, token: str, role: Optional[str] = None) -> None:
        self._storage[SESSION_TOKEN_KEY] = token or ""
        self._storage[SESSION_ROLE_KEY] = role or ""

    def clear(self) -> None:
        self._storage.pop(SESSION_TOKEN_KEY, None)
        self._storage.pop(SESSION_ROLE_KEY, None)


class MemorySessionStore(StorageSessionStore):
    """Сессия в памяти процесса."""

    def __init__(self, token: Optional[str] = None, role: Optional[str] = None) -> None:
        super().__init__({})
        if token:
            self.save(token, role)
