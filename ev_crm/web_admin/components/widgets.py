# ev_crm/web_admin/components/widgets.py
"""
Общие элементы экранов: уведомления, поля форм, заголовки сортировки,
пагинация, окно подробностей.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

from nicegui import ui

from ev_crm.common.text import unwrap_image
from ev_crm.core.forms import FormSession, describe
from ev_crm.core.roster import RecordListState
from ev_crm.shared.models import Record


def notify_result(success: bool, message: str) -> None:
    if message:
        ui.notify(message, type="positive" if success else "negative")


def form_input(form: FormSession, name: str, label: str, **kwargs: Any) -> ui.input:
    """ui.input, связанный с полем формы; ошибка показывается под полем."""
    rule = form.rules[name]

    def first_error(value: Any) -> Optional[str]:
        codes = rule.check(value)
        return describe(codes[0]) if codes else None

    return ui.input(
        label,
        value=form.value(name),
        on_change=lambda e: form.set_field(name, e.value),
        validation=first_error,
        **kwargs,
    ).classes("w-full")


def sort_header(
    roster: RecordListState,
    columns: Sequence[tuple[str, str]],
    on_sort: Callable[[str], None],
) -> None:
    """Строка заголовков с индикатором направления (↕ ↑ ↓)."""
    for column, label in columns:
        ui.button(
            f"{label} {roster.sort_icon(column)}",
            on_click=lambda c=column: on_sort(c),
        ).props("flat dense no-caps").classes("font-bold justify-start")


def pager(roster: RecordListState, on_page: Callable[[int], None]) -> None:
    with ui.row().classes("items-center gap-4"):
        ui.pagination(
            1,
            max(roster.total_pages, 1),
            direction_links=True,
            value=roster.current_page,
            on_change=lambda e: on_page(e.value),
        )
        ui.label(f"{len(roster.filtered)} records").classes("text-grey-7")


def cell_text(record: Record, column: str) -> str:
    value = record.get(column)
    return "" if value is None else str(value)


def details_card(record: Record, fields: Sequence[tuple[str, str]], image_field: str = "driver_image") -> None:
    """Поля записи и фото водителя, если оно есть."""
    image = unwrap_image(record.get(image_field))
    if image:
        ui.image(image).classes("w-48 rounded")
    for field, label in fields:
        with ui.row().classes("gap-2"):
            ui.label(f"{label}:").classes("font-bold")
            ui.label(cell_text(record, field))
