"""
Persistence of the dashboard layout: configured widgets plus the theme.

The whole state is one JSON-compatible blob stored under a fixed key in a
Django cache alias (a key-value store is all the dashboard needs). Datetime
fields are written as ISO 8601 strings and restored to equal instants.
"""

import datetime
import logging
from typing import Any

from django.conf import settings
from django.core.cache import caches

from finboard.widgets.types import FieldDescriptor, Theme, WidgetSpec

logger = logging.getLogger(__name__)

STORAGE_KEY = "finance-dashboard-state"
DEFAULT_THEME = Theme.dark


class WidgetNotFound(Exception):
    pass


def _dump_datetime(value: datetime.datetime | None) -> str | None:
    return value.isoformat() if value else None


def _load_datetime(value: Any) -> datetime.datetime | None:
    if not value:
        return None
    if isinstance(value, datetime.datetime):
        return value
    return datetime.datetime.fromisoformat(value)


def serialize_widget(spec: WidgetSpec) -> dict:
    return {
        "id": spec.id,
        "name": spec.name,
        "description": spec.description,
        "api_url": spec.api_url,
        "refresh_interval": spec.refresh_interval,
        "display_mode": str(spec.display_mode),
        "chart_type": str(spec.chart_type) if spec.chart_type else None,
        "chart_interval": str(spec.chart_interval) if spec.chart_interval else None,
        "fields": [field.asdict() for field in spec.fields],
        "created_at": _dump_datetime(spec.created_at),
        "last_updated": _dump_datetime(spec.last_updated),
    }


def deserialize_widget(data: dict) -> WidgetSpec:
    return WidgetSpec(
        id=data["id"],
        name=data["name"],
        description=data.get("description") or "",
        api_url=data["api_url"],
        refresh_interval=data.get("refresh_interval", 0),
        display_mode=data.get("display_mode", "card"),
        chart_type=data.get("chart_type"),
        chart_interval=data.get("chart_interval"),
        fields=[FieldDescriptor.build(**field) for field in data.get("fields", [])],
        created_at=_load_datetime(data.get("created_at")) or datetime.datetime.now(datetime.UTC),
        last_updated=_load_datetime(data.get("last_updated")),
    )


class DashboardStore:
    """Widgets and theme, persisted on every change."""

    def __init__(self, backend=None, key: str = STORAGE_KEY):
        if backend is None:
            backend = caches[getattr(settings, "DASHBOARD_STATE_CACHE", "default")]
        self.backend = backend
        self.key = key
        self.widgets: list[WidgetSpec] = []
        self.theme: Theme = DEFAULT_THEME
        self.load()

    def load(self) -> None:
        blob = self.backend.get(self.key)
        if not blob:
            self.widgets, self.theme = [], DEFAULT_THEME
            return
        self.widgets = [deserialize_widget(item) for item in blob.get("widgets", [])]
        self.theme = Theme(blob.get("theme") or DEFAULT_THEME)
        logger.debug(f"Loaded {len(self.widgets)} widgets from {self.key}")

    def save(self) -> None:
        blob = {"widgets": [serialize_widget(widget) for widget in self.widgets], "theme": str(self.theme)}
        self.backend.set(self.key, blob, timeout=None)

    def get_widget(self, widget_id: str) -> WidgetSpec:
        for widget in self.widgets:
            if widget.id == widget_id:
                return widget
        raise WidgetNotFound(f"Widget {widget_id} not found")

    def add_widget(self, widget: WidgetSpec) -> WidgetSpec:
        self.widgets.append(widget)
        self.save()
        logger.info(f"Added widget {widget.id} ({widget.display_mode}) for {widget.api_url}")
        return widget

    def remove_widget(self, widget_id: str) -> None:
        remaining = [widget for widget in self.widgets if widget.id != widget_id]
        if len(remaining) == len(self.widgets):
            raise WidgetNotFound(f"Widget {widget_id} not found")
        self.widgets = remaining
        self.save()

    def update_widget(self, widget_id: str, **updates) -> WidgetSpec:
        widget = self.get_widget(widget_id)
        if "fields" in updates:
            updates["fields"] = [
                field.asdict() if isinstance(field, FieldDescriptor) else field for field in updates["fields"]
            ]
        data = serialize_widget(widget)
        data.update(updates)
        data["id"] = widget_id
        updated = deserialize_widget(data)
        updated.last_updated = datetime.datetime.now(datetime.UTC)
        self.widgets = [updated if item.id == widget_id else item for item in self.widgets]
        self.save()
        return updated

    def reorder_widgets(self, widget_ids: list[str]) -> list[WidgetSpec]:
        """Reorder to match ``widget_ids``; widgets not listed are dropped."""
        by_id = {widget.id: widget for widget in self.widgets}
        self.widgets = [by_id[widget_id] for widget_id in widget_ids if widget_id in by_id]
        self.save()
        return self.widgets

    def set_theme(self, theme: Theme | str) -> Theme:
        self.theme = Theme(theme)
        self.save()
        return self.theme
