# ev_crm/infra/__init__.py
"""
Инфраструктура: HTTP клиенты backend и хранилище сессии.
"""

from ev_crm.infra.api_clients import BaseClient, CrmClient
from ev_crm.infra.session_store import MemorySessionStore, SessionContext, StorageSessionStore

__all__ = [
    "BaseClient",
    "CrmClient",
    "MemorySessionStore",
    "SessionContext",
    "StorageSessionStore",
]
