#!/usr/bin/env python3
# main.py
"""
Главная точка входа консоли EV Fleet CRM.
Запускает Web Admin UI (NiceGUI) поверх внешнего CRM backend.
"""

from __future__ import annotations

import sys

from ev_crm.config import settings
from ev_crm.common.logger import setup_logging, get_logger


MODES = ("web_admin",)

logger = get_logger("main")


def run_web_admin() -> None:
    """Запускает Web Admin UI."""
    from ev_crm.web_admin.app import run_web as start_web_admin

    logger.info(
        f"Запуск Web Admin UI на {settings.web_admin.HOST}:{settings.web_admin.PORT} "
        f"(backend: {settings.backend.BACKEND_BASE_URL})"
    )
    start_web_admin(
        host=settings.web_admin.HOST,
        port=settings.web_admin.PORT,
    )


def main(mode: str | None = None) -> None:
    """
    Запускает компонент консоли.

    ui.run сам поднимает event loop uvicorn, поэтому main синхронная.
    """
    setup_logging()
    mode = mode or "web_admin"
    logger.info(
        f"{settings.system.PROJECT_NAME} v{settings.system.VERSION} "
        f"({settings.system.ENVIRONMENT}), режим: {mode}"
    )

    if mode == "web_admin":
        run_web_admin()
    else:
        raise ValueError(f"Неизвестный режим: {mode}")


def print_usage() -> None:
    """Выводит справку по использованию."""
    print(f"""
{settings.web_admin.TITLE} v{settings.system.VERSION} — консоль парка электрорикш

Использование:
    python main.py [mode]

Режимы:
    web_admin              — Web Admin UI (по умолчанию)

Переменные окружения:
    BACKEND_BASE_URL       — адрес CRM backend
    STORAGE_SECRET         — секрет для хранилища сессий браузера
    WEB_ADMIN_PORT         — порт консоли
    LOG_LEVEL              — уровень логирования

Примеры:
    python main.py
    BACKEND_BASE_URL=http://crm.local/neubolt python main.py web_admin
    """)


if __name__ in {"__main__", "__mp_main__"}:
    mode = None

    if len(sys.argv) > 1:
        arg = sys.argv[1].lower()
        if arg in ("--help", "-h"):
            print_usage()
            sys.exit(0)
        elif arg in MODES:
            mode = arg
        else:
            print(f"Ошибка: неизвестный режим '{arg}'")
            print_usage()
            sys.exit(1)

    try:
        main(mode)
    except KeyboardInterrupt:
        pass
