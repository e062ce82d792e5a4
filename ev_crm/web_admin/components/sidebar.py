# ev_crm/web_admin/components/sidebar.py
"""
Шапка и боковое меню консоли.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from nicegui import ui

from ev_crm.config import settings


def create_layout(on_logout: Callable[[], Awaitable[None]]) -> None:
    """Создаёт шапку с кнопкой меню и боковое меню."""
    with ui.header().classes(replace="row items-center"):
        ui.button(on_click=lambda: left_drawer.toggle(), icon="menu").props("flat color=white")
        ui.label(settings.web_admin.TITLE).classes("text-h6 ml-4")
        ui.space()
        ui.button("Logout", icon="logout", on_click=on_logout).props("flat color=white")

    with ui.left_drawer(value=True) as left_drawer:
        ui.label("Menu").classes("text-h6 q-mb-md")
        _menu_item("📋 Complaints", "/")
        _menu_item("🛺 Drivers", "/drivers")


def _menu_item(label: str, path: str) -> None:
    ui.button(
        label,
        on_click=lambda: ui.navigate.to(path),
    ).props("flat align=left").classes("w-full justify-start")
