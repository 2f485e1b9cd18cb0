import datetime

import pytest
from django.core.cache import cache

from finboard.widgets.store import (
    STORAGE_KEY,
    DashboardStore,
    WidgetNotFound,
    deserialize_widget,
    serialize_widget,
)
from finboard.widgets.tests.factories import ChartWidgetFactory, FieldDescriptorFactory, WidgetSpecFactory
from finboard.widgets.types import Theme


def test_widget_round_trip_preserves_instants():
    created = datetime.datetime(2024, 5, 1, 9, 15, 30, 123456, tzinfo=datetime.UTC)
    updated = created + datetime.timedelta(hours=5)
    widget = ChartWidgetFactory(created_at=created, last_updated=updated, chart_interval="weekly")

    data = serialize_widget(widget)
    assert data["created_at"] == "2024-05-01T09:15:30.123456+00:00"

    restored = deserialize_widget(data)
    assert restored == widget
    assert restored.created_at == created
    assert restored.last_updated == updated


def test_missing_created_at_rehydrates_to_now():
    data = serialize_widget(WidgetSpecFactory())
    data.pop("created_at")

    before = datetime.datetime.now(datetime.UTC)
    restored = deserialize_widget(data)
    assert restored.created_at >= before


def test_store_persists_under_fixed_key():
    store = DashboardStore()
    widget = store.add_widget(WidgetSpecFactory())

    blob = cache.get(STORAGE_KEY)
    assert blob["theme"] == "dark"
    assert blob["widgets"][0]["id"] == widget.id

    assert DashboardStore().get_widget(widget.id) == widget


def test_remove_widget():
    store = DashboardStore()
    widget = store.add_widget(WidgetSpecFactory())

    store.remove_widget(widget.id)
    assert DashboardStore().widgets == []
    with pytest.raises(WidgetNotFound):
        store.remove_widget(widget.id)


def test_update_widget_stamps_last_updated():
    store = DashboardStore()
    widget = store.add_widget(WidgetSpecFactory(last_updated=None))

    fields = [FieldDescriptorFactory(path="price.change", label="Change", format="percentage")]
    updated = store.update_widget(widget.id, name="Renamed", refresh_interval=0, fields=fields)

    assert updated.id == widget.id
    assert updated.name == "Renamed"
    assert updated.refresh_interval == 0
    assert updated.fields == fields
    assert updated.last_updated is not None
    assert updated.created_at == widget.created_at
    assert DashboardStore().get_widget(widget.id) == updated


def test_update_missing_widget():
    with pytest.raises(WidgetNotFound):
        DashboardStore().update_widget("missing", name="x")


def test_reorder_widgets_drops_unknown_ids():
    store = DashboardStore()
    first, second, third = (store.add_widget(WidgetSpecFactory()) for _ in range(3))

    store.reorder_widgets([third.id, "unknown", first.id])

    assert [w.id for w in DashboardStore().widgets] == [third.id, first.id]
    assert second.id not in [w.id for w in store.widgets]


def test_set_theme():
    store = DashboardStore()
    assert store.theme == Theme.dark

    store.set_theme("light")
    assert DashboardStore().theme == Theme.light

    with pytest.raises(ValueError):
        store.set_theme("sepia")
