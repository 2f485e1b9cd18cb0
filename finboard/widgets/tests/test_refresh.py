from django.core.cache import cache

from finboard.widgets.refresh import RefreshSchedule, WidgetRefresher, latest_render_key
from finboard.widgets.service import WidgetBindingService
from finboard.widgets.store import DashboardStore
from finboard.widgets.tests.factories import WidgetSpecFactory


class TestRefreshSchedule:
    def test_new_widget_is_due_immediately(self, clock):
        schedule = RefreshSchedule(clock)
        widget = WidgetSpecFactory(refresh_interval=30)

        schedule.sync([widget])
        assert schedule.due() == [widget.id]

        schedule.begin(widget.id)
        assert schedule.due() == []
        assert schedule.seconds_until_next() == 30

        clock.advance(30)
        assert schedule.due() == [widget.id]

    def test_timers_are_independent(self, clock):
        schedule = RefreshSchedule(clock)
        fast = WidgetSpecFactory(refresh_interval=10)
        slow = WidgetSpecFactory(refresh_interval=60)
        schedule.sync([fast, slow])
        schedule.begin(fast.id)
        schedule.begin(slow.id)

        clock.advance(10)
        assert schedule.due() == [fast.id]

    def test_zero_interval_disables_refresh(self, clock):
        schedule = RefreshSchedule(clock)
        widget = WidgetSpecFactory(refresh_interval=0)

        schedule.sync([widget])
        assert widget.id not in schedule
        assert schedule.seconds_until_next() is None

    def test_removed_widget_is_cancelled(self, clock):
        schedule = RefreshSchedule(clock)
        widget = WidgetSpecFactory()
        schedule.sync([widget])
        token = schedule.begin(widget.id)

        schedule.sync([])

        assert widget.id not in schedule
        assert schedule.accept(widget.id, token) is False

    def test_reconfigured_widget_discards_in_flight_result(self, clock):
        schedule = RefreshSchedule(clock)
        widget = WidgetSpecFactory()
        schedule.sync([widget])
        token = schedule.begin(widget.id)

        widget.api_url = "https://api.example.com/other"
        schedule.sync([widget])

        assert schedule.accept(widget.id, token) is False
        assert schedule.accept(widget.id, schedule.begin(widget.id)) is True

    def test_unchanged_widget_keeps_its_timer(self, clock):
        schedule = RefreshSchedule(clock)
        widget = WidgetSpecFactory()
        schedule.sync([widget])
        token = schedule.begin(widget.id)

        schedule.sync([widget])
        assert schedule.due() == []
        assert schedule.accept(widget.id, token) is True


class TestWidgetRefresher:
    def test_run_cycle_stores_latest_render(self, httpx_mock, response_cache, clock):
        store = DashboardStore()
        widget = store.add_widget(WidgetSpecFactory())
        httpx_mock.add_response(url=widget.api_url, json={"price": {"current": 2450.75}})

        refresher = WidgetRefresher(
            store, WidgetBindingService(response_cache=response_cache), cache, RefreshSchedule(clock)
        )

        assert refresher.run_cycle() == [widget.id]
        latest = cache.get(latest_render_key(widget.id))
        assert latest["state"] == "ready"
        assert latest["data"][0]["display"] == "₹2,450.75"

        # not due again until the interval passes
        assert refresher.run_cycle() == []

    def test_run_cycle_drops_result_for_removed_widget(self, response_cache, clock):
        store = DashboardStore()
        widget = store.add_widget(WidgetSpecFactory())

        def fetcher(url):
            DashboardStore().remove_widget(widget.id)
            return {"price": {"current": 1}}

        refresher = WidgetRefresher(
            store, WidgetBindingService(fetcher=fetcher, response_cache=response_cache), cache, RefreshSchedule(clock)
        )

        assert refresher.run_cycle() == []
        assert cache.get(latest_render_key(widget.id)) is None

    def test_run_cycle_skips_widget_disabled_during_cycle(self, response_cache, clock):
        store = DashboardStore()
        first = store.add_widget(WidgetSpecFactory())
        second = store.add_widget(WidgetSpecFactory())

        def fetcher(url):
            if url == first.api_url:
                DashboardStore().update_widget(second.id, refresh_interval=0)
            return {"price": {"current": 1}}

        refresher = WidgetRefresher(
            store, WidgetBindingService(fetcher=fetcher, response_cache=response_cache), cache, RefreshSchedule(clock)
        )

        assert refresher.run_cycle() == [first.id]
        assert second.id not in refresher.schedule
        assert cache.get(latest_render_key(second.id)) is None
