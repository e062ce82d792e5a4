# ev_crm/core/roster/list_state.py
"""
Состояние списка записей (водители, жалобы).

Хранит полный набор записей в порядке загрузки и выводит из него
отфильтрованный, отсортированный набор и срез текущей страницы.
С сетью не работает.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Generic, Iterable, Optional, Sequence, TypeVar

from ev_crm.common.constants import SORT_ICONS, SortDirection, SortMode
from ev_crm.common.logger import get_logger
from ev_crm.common.text import sanitize_query
from ev_crm.config import settings
from ev_crm.shared.models import PageWindow, Record, SortDirective


logger = get_logger("roster")

R = TypeVar("R", bound=Record)


def to_epoch(value: Any) -> float:
    """
    Переводит значение даты в epoch секунды.
    Пустое или нераспознанное значение — 0.
    """
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        try:
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            try:
                dt = parsedate_to_datetime(text)
            except (TypeError, ValueError, IndexError):
                return 0.0
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


class RecordListState(Generic[R]):
    """
    Список с поиском, сортировкой и пагинацией.

    SortMode.SINGLE — активна одна колонка, переключение колонки сбрасывает
    остальные. SortMode.MULTI — колонки образуют цепочку tie-breaker'ов в
    порядке добавления. Цикл направления для обоих: none → asc → desc → none.
    """

    def __init__(
        self,
        *,
        search_fields: Sequence[str],
        sort_mode: SortMode = SortMode.SINGLE,
        page_size: Optional[int] = None,
        date_markers: Optional[Sequence[str]] = None,
    ) -> None:
        self.search_fields = list(search_fields)
        self.sort_mode = sort_mode
        self.date_markers = tuple(date_markers if date_markers is not None else settings.roster.DATE_COLUMN_MARKERS)

        self.window = PageWindow(page_size=page_size or settings.roster.PAGE_SIZE)
        self.query: str = ""
        self.selected: Optional[R] = None

        self._records: list[R] = []
        self._view: list[R] = []
        self._directives: list[SortDirective] = []
        self.page_items: list[R] = []

    # =========================================================================
    # СВОЙСТВА
    # =========================================================================

    @property
    def records(self) -> list[R]:
        """Полный набор записей в порядке загрузки."""
        return list(self._records)

    @property
    def filtered(self) -> list[R]:
        """Записи после поиска и сортировки."""
        return list(self._view)

    @property
    def directives(self) -> list[SortDirective]:
        return [d.model_copy() for d in self._directives]

    @property
    def current_page(self) -> int:
        return self.window.current_page

    @property
    def page_size(self) -> int:
        return self.window.page_size

    @property
    def total_pages(self) -> int:
        return self.window.total_pages

    # =========================================================================
    # ОПЕРАЦИИ
    # =========================================================================

    def load(self, records: Iterable[R]) -> None:
        """Заменяет набор целиком и возвращается на первую страницу."""
        self._records = list(records)
        self.selected = None
        self._refresh(page=1)
        logger.debug(f"Загружено записей: {len(self._records)}, после фильтра: {len(self._view)}")

    def search(self, query: Optional[str]) -> None:
        """Регистронезависимый поиск подстроки по search_fields."""
        self.query = sanitize_query(query)
        self._refresh(page=1)

    def sort(self, column: str) -> SortDirection:
        """Переключает направление колонки и возвращает новое."""
        direction = self.direction(column).next()

        if self.sort_mode is SortMode.SINGLE:
            self._directives = [] if direction is SortDirection.NONE else [
                SortDirective(column=column, direction=direction)
            ]
        else:
            existing = next((d for d in self._directives if d.column == column), None)
            if existing is None:
                self._directives.append(SortDirective(column=column, direction=direction))
            elif direction is SortDirection.NONE:
                self._directives.remove(existing)
            else:
                existing.direction = direction

        logger.debug(f"Сортировка: {column} → {direction.value}")
        self._refresh(page=1)
        return direction

    def set_page(self, page: int) -> None:
        """Переходит на страницу, приводя номер к [1, total_pages]."""
        self._slice(int(page))

    def direction(self, column: str) -> SortDirection:
        for directive in self._directives:
            if directive.column == column:
                return directive.direction
        return SortDirection.NONE

    def sort_icon(self, column: str) -> str:
        return SORT_ICONS[self.direction(column)]

    def record_at(self, index: int) -> R:
        """Запись текущей страницы по индексу строки."""
        return self.page_items[index]

    def select(self, record: Optional[R]) -> None:
        """Запись, открытая в окне подробностей."""
        self.selected = record

    # =========================================================================
    # ВНУТРЕННЕЕ
    # =========================================================================

    def _is_date_column(self, column: str) -> bool:
        name = column.lower()
        return any(marker in name for marker in self.date_markers)

    def _sort_key(self, record: R, column: str) -> tuple:
        value = record.get(column)
        if self._is_date_column(column):
            return (1, to_epoch(value))
        if value is None:
            return (0, 0)
        if isinstance(value, bool):
            return (1, int(value))
        if isinstance(value, (int, float)):
            return (1, value)
        return (2, str(value).lower())

    def _matches(self, record: R, needle: str) -> bool:
        for field in self.search_fields:
            value = record.get(field)
            # запрос очищен sanitize_query, значение очищается так же
            if value is not None and needle in sanitize_query(str(value)).lower():
                return True
        return False

    def _refresh(self, page: int) -> None:
        needle = self.query.lower()
        view = [r for r in self._records if self._matches(r, needle)] if needle else list(self._records)

        # стабильная сортировка от младшей колонки к старшей
        for directive in reversed(self._directives):
            if directive.direction is SortDirection.NONE:
                continue
            view.sort(
                key=lambda r, c=directive.column: self._sort_key(r, c),
                reverse=directive.direction is SortDirection.DESC,
            )

        self._view = view
        self.window.total_items = len(view)
        self._slice(page)

    def _slice(self, page: int) -> None:
        self.window.current_page = self.window.clamp(page)
        start = self.window.offset
        self.page_items = self._view[start:start + self.window.page_size]
