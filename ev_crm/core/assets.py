# ev_crm/core/assets.py
"""
Кодирование загруженных файлов в data URL.

Чтение и base64 выполняются в отдельном потоке, чтобы не блокировать
event loop NiceGUI на больших фотографиях.
"""

from __future__ import annotations

import asyncio
import base64
import mimetypes
from pathlib import Path
from typing import Optional, Union

from ev_crm.common.logger import log_debug
from ev_crm.shared.models import UploadedAsset


DEFAULT_CONTENT_TYPE = "application/octet-stream"

Content = Union[bytes, bytearray, str, Path]


def guess_content_type(filename: Optional[str]) -> str:
    if not filename:
        return DEFAULT_CONTENT_TYPE
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or DEFAULT_CONTENT_TYPE


def _read_bytes(content: Content) -> bytes:
    if isinstance(content, (bytes, bytearray)):
        return bytes(content)
    return Path(content).read_bytes()


def _to_data_url(data: bytes, content_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


async def encode_upload(
    field: str,
    content: Content,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
) -> UploadedAsset:
    """
    Кодирует байты (или файл по пути) в UploadedAsset с data URL.

    Args:
        field: поле формы, к которому относится файл
        content: байты файла или путь к нему
        filename: имя файла, по нему определяется MIME тип
        content_type: явный MIME тип (приоритетнее имени файла)
    """
    if filename is None and isinstance(content, (str, Path)):
        filename = Path(content).name
    mime = content_type or guess_content_type(filename)

    data = await asyncio.to_thread(_read_bytes, content)
    data_url = await asyncio.to_thread(_to_data_url, data, mime)

    await log_debug(f"Файл {filename or '-'} для поля {field}: {len(data)} байт")
    return UploadedAsset(field=field, data_url=data_url, filename=filename, content_type=mime)
