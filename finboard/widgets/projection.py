"""
Projection of live widget data into what a card, table or chart displays.

Every render cycle ends in exactly one state: ready, empty or error
(``loading`` is only used for snapshots of an in-flight refresh).
"""

import dataclasses
import logging
import math
from enum import StrEnum
from typing import Any

from finboard.widgets.discovery import build_chart_points, find_display_array
from finboard.widgets.formatting import coerce_number, format_value, plain_string
from finboard.widgets.paths import resolve
from finboard.widgets.service import WidgetBindingService, WidgetFetchError
from finboard.widgets.types import ChartType, DisplayMode, FieldDescriptor, ValueType, WidgetSpec

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data available"
NO_FIELDS_MESSAGE = "No fields found"
DEFAULT_PAGE_SIZE = 10


class RenderState(StrEnum):
    loading = "loading"
    ready = "ready"
    empty = "empty"
    error = "error"


class SortDirection(StrEnum):
    asc = "asc"
    desc = "desc"


@dataclasses.dataclass
class CardItem:
    label: str
    path: str
    value: Any
    display: str


@dataclasses.dataclass
class TableProjection:
    columns: list[dict]
    rows: list[list[str]]
    total_rows: int
    page: int
    page_size: int
    page_count: int


@dataclasses.dataclass
class ChartProjection:
    points: list[dict]
    series: list[str]
    chart_type: str


@dataclasses.dataclass
class WidgetRender:
    widget_id: str
    display_mode: str
    state: RenderState
    payload: Any = None
    message: str | None = None
    error_category: str | None = None

    def asdict(self) -> dict:
        payload = self.payload
        if dataclasses.is_dataclass(payload):
            payload = dataclasses.asdict(payload)
        elif isinstance(payload, list):
            payload = [dataclasses.asdict(item) if dataclasses.is_dataclass(item) else item for item in payload]
        return {
            "widget_id": self.widget_id,
            "display_mode": self.display_mode,
            "state": str(self.state),
            "data": payload,
            "message": self.message,
            "error_category": self.error_category,
        }


def project_card(data: Any, fields: list[FieldDescriptor]) -> list[CardItem]:
    items = []
    for field in fields:
        value = resolve(data, field.path)
        items.append(CardItem(label=field.label, path=field.path, value=value, display=format_value(value, field.format)))
    return items


def _sort_key(value: Any):
    # missing values always sort last, numbers before text
    if value is None:
        return (2, 0, "")
    number = coerce_number(value)
    if number is not None:
        return (0, number, "")
    return (1, 0, str(value).lower())


def _matches(value: Any, needle: str) -> bool:
    return value is not None and needle in plain_string(value).lower()


def filter_rows(rows: list, fields: list[FieldDescriptor], search: str) -> list:
    needle = search.strip().lower()
    if not needle:
        return list(rows)
    return [row for row in rows if any(_matches(resolve(row, field.path), needle) for field in fields)]


def sort_rows(rows: list, sort_path: str | None, direction: SortDirection | str = SortDirection.asc) -> list:
    if not sort_path:
        return list(rows)
    present = [row for row in rows if resolve(row, sort_path) is not None]
    missing = [row for row in rows if resolve(row, sort_path) is None]
    present.sort(key=lambda row: _sort_key(resolve(row, sort_path)), reverse=direction == SortDirection.desc)
    return present + missing


def project_table(
    data: Any,
    fields: list[FieldDescriptor],
    search: str = "",
    sort_path: str | None = None,
    sort_direction: SortDirection | str = SortDirection.asc,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> TableProjection:
    rows = find_display_array(data)
    rows = sort_rows(filter_rows(rows, fields, search), sort_path, sort_direction)

    page_size = max(page_size, 1)
    page_count = max(math.ceil(len(rows) / page_size), 1)
    page = min(max(page, 1), page_count)
    start = (page - 1) * page_size

    return TableProjection(
        columns=[{"path": field.path, "label": field.label} for field in fields],
        rows=[
            [format_value(resolve(row, field.path), field.format) for field in fields]
            for row in rows[start : start + page_size]
        ],
        total_rows=len(rows),
        page=page,
        page_size=page_size,
        page_count=page_count,
    )


def project_chart(data: Any, fields: list[FieldDescriptor], chart_type: ChartType | str | None = None) -> ChartProjection:
    points = build_chart_points(data, fields, chart_type)
    first_point = points[0] if points else {}
    series = [
        field.label
        for field in fields
        if field.value_type == ValueType.number or isinstance(first_point.get(field.label), int | float)
    ]
    return ChartProjection(points=points, series=series, chart_type=str(chart_type or ChartType.line))


def project_widget(spec: WidgetSpec, data: Any, **table_options) -> WidgetRender:
    """Project already-fetched data for a widget."""
    mode = spec.display_mode

    if mode == DisplayMode.table:
        table = project_table(data, spec.fields, **table_options)
        if not table.total_rows:
            return WidgetRender(spec.id, mode, RenderState.empty, payload=table, message=NO_DATA_MESSAGE)
        return WidgetRender(spec.id, mode, RenderState.ready, payload=table)

    if mode == DisplayMode.chart:
        chart = project_chart(data, spec.fields, spec.chart_type)
        if not chart.points:
            return WidgetRender(spec.id, mode, RenderState.empty, payload=chart, message=NO_DATA_MESSAGE)
        return WidgetRender(spec.id, mode, RenderState.ready, payload=chart)

    if not spec.fields:
        return WidgetRender(spec.id, mode, RenderState.empty, payload=[], message=NO_FIELDS_MESSAGE)
    return WidgetRender(spec.id, mode, RenderState.ready, payload=project_card(data, spec.fields))


def render_widget(spec: WidgetSpec, service: WidgetBindingService, **table_options) -> WidgetRender:
    """Fetch live data for a widget and project it for its display mode."""
    try:
        data = service.fetch_widget_data(spec.api_url)
    except WidgetFetchError as e:
        logger.info(f"Widget {spec.id} render failed: {e.category}")
        return WidgetRender(
            spec.id, spec.display_mode, RenderState.error, message=e.message, error_category=e.category
        )
    return project_widget(spec, data, **table_options)
