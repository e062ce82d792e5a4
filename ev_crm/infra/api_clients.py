# ev_crm/infra/api_clients.py
"""
HTTP клиенты CRM backend.

Каждый вызов — один запрос/ответ без повторов. Bearer-токен берётся из
SessionContext на каждый запрос; без токена запрос уходит без заголовка
Authorization (отклонять его — задача backend).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from ev_crm.common.constants import Messages, TypeMsg
from ev_crm.common.exceptions import GatewayError
from ev_crm.common.logger import log_debug, log_error, log_info
from ev_crm.config import settings
from ev_crm.infra.session_store import MemorySessionStore, SessionContext
from ev_crm.shared.models import AuthResult, ComplaintRecord, DriverRecord, IdentityDetails, LoginRequest


def _extract_backend_message(response: httpx.Response) -> Optional[str]:
    """Сообщение об ошибке из тела ответа: error, затем message, затем detail."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("error", "message", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None


class BaseClient:
    def __init__(
        self,
        base_url: str,
        session: Optional[SessionContext] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.session: SessionContext = session if session is not None else MemorySessionStore()
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "BaseClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _auth_headers(self) -> Dict[str, str]:
        token = self.session.token
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self.client.request(
                method, path, json=json, params=params, headers=self._auth_headers()
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            backend_message = _extract_backend_message(e.response)
            await log_info(
                f"{method} {path} → {status}",
                type_msg=TypeMsg.WARNING,
                extra={"status": status, "backend_message": backend_message},
            )
            raise GatewayError(
                f"{method} {path} failed with status {status}",
                status_code=status,
                backend_message=backend_message,
            ) from e
        except httpx.RequestError as e:
            await log_error(f"{method} {path}: сетевая ошибка {e!r}")
            raise GatewayError(Messages.NETWORK_ERROR) from e

        await log_debug(f"{method} {path} → {response.status_code}")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def _post(self, path: str, json: Any = None) -> Any:
        return await self._request("POST", path, json=json)

    async def _put(self, path: str, json: Any = None) -> Any:
        return await self._request("PUT", path, json=json)

    async def _delete(self, path: str, json: Any = None) -> Any:
        return await self._request("DELETE", path, json=json)


class CrmClient(BaseClient):
    """Remote gateway: водители, жалобы, поиск по CNIC, авторизация."""

    def __init__(
        self,
        session: Optional[SessionContext] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        backend = settings.backend
        super().__init__(
            base_url or backend.BACKEND_BASE_URL,
            session=session,
            timeout=timeout if timeout is not None else backend.REQUEST_TIMEOUT,
            transport=transport,
        )
        self.crm_prefix = backend.CRM_PREFIX
        self.login_path = backend.AUTH_LOGIN_PATH

    def _crm(self, path: str) -> str:
        return f"{self.crm_prefix}{path}"

    # === АВТОРИЗАЦИЯ ===

    async def login(self, username: str, password: str) -> AuthResult:
        """Вход сотрудника. Сохраняет токен и роль в сессии."""
        credentials = LoginRequest(username=username, password=password)
        data = await self._post(self.login_path, json=credentials.model_dump())
        result = AuthResult.model_validate(data if isinstance(data, dict) else {})
        self.session.save(result.access_token, result.role)
        await log_info(f"Вход выполнен: {username} (роль: {result.role or '-'})")
        return result

    async def logout(self) -> None:
        self.session.clear()
        await log_info("Сессия очищена")

    # === ВОДИТЕЛИ ===

    async def get_driver_details(self, cnic: str) -> Optional[IdentityDetails]:
        """
        Данные водителя по 13-значному CNIC.
        Пустой ответ или 404 — водитель не найден (None).
        """
        try:
            data = await self._get(self._crm(f"/get-drivers_info/{cnic}"))
        except GatewayError as e:
            if e.is_not_found:
                return None
            raise

        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict) or not data:
            return None
        return IdentityDetails.model_validate(data)

    async def get_drivers(self) -> List[DriverRecord]:
        data = await self._get("/get-ev_drivers")
        if isinstance(data, dict):
            data = data.get("drivers", [])
        if not isinstance(data, list):
            return []
        return [DriverRecord.model_validate(row) for row in data if isinstance(row, dict)]

    async def post_driver(self, driver: Dict[str, Any]) -> Any:
        return await self._post("/ev_drivers", json=driver)

    # === ЖАЛОБЫ ===

    async def get_complaints(self) -> List[ComplaintRecord]:
        data = await self._get(self._crm("/get-complaints"))
        rows = data.get("complaints") if isinstance(data, dict) else data
        if not isinstance(rows, list):
            return []
        return [ComplaintRecord.model_validate(row) for row in rows if isinstance(row, dict)]

    async def get_complaint_by_id(self, complaint_id: str | int) -> Optional[ComplaintRecord]:
        try:
            data = await self._get(self._crm(f"/get-complaints_id/{complaint_id}"))
        except GatewayError as e:
            if e.is_not_found:
                return None
            raise
        if isinstance(data, dict) and isinstance(data.get("complaint"), dict):
            data = data["complaint"]
        if not isinstance(data, dict) or not data:
            return None
        return ComplaintRecord.model_validate(data)

    async def get_complaints_by_cnic(self, cnic: str) -> List[ComplaintRecord]:
        data = await self._get(self._crm(f"/get-complaints_cnic/{cnic}"))
        rows = data.get("complaints") if isinstance(data, dict) else data
        if not isinstance(rows, list):
            return []
        return [ComplaintRecord.model_validate(row) for row in rows if isinstance(row, dict)]

    async def post_complaint(self, complaint: Dict[str, Any]) -> Any:
        return await self._post(self._crm("/complaints"), json=complaint)

    async def update_complaint(self, complaint_id: str | int, data: Dict[str, Any]) -> Any:
        return await self._put(self._crm(f"/put-complaints/{complaint_id}"), json=data)

    async def delete_complaint(self, complaint_id: str | int, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self._delete(self._crm(f"/delete-complaints/{complaint_id}"), json=data)
