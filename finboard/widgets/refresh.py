"""
Per-widget refresh timers.

Each widget refreshes on its own interval; timers are not coordinated with
each other and an interval of 0 disables refreshing. When a widget is
removed or its configuration changes its timer is replaced. A fetch that was
already running for the old configuration is not cancelled, but its result
is discarded: ``begin`` hands out a generation token and ``accept`` only
admits results whose token is still current.
"""

import dataclasses
import logging
import time
from collections.abc import Callable

from finboard.widgets.projection import render_widget
from finboard.widgets.store import WidgetNotFound
from finboard.widgets.types import WidgetSpec

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class RefreshTimer:
    widget_id: str
    interval: float
    next_run: float
    signature: tuple
    generation: int


class RefreshSchedule:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._timers: dict[str, RefreshTimer] = {}
        self._generations: dict[str, int] = {}

    def __contains__(self, widget_id: str) -> bool:
        return widget_id in self._timers

    def __len__(self):
        return len(self._timers)

    def schedule(self, widget: WidgetSpec, run_immediately: bool = True) -> RefreshTimer | None:
        """(Re)start the timer for a widget, invalidating in-flight results."""
        self.cancel(widget.id)
        if widget.refresh_interval <= 0:
            return None

        generation = self._generations.get(widget.id, 0)
        now = self.clock()
        timer = RefreshTimer(
            widget_id=widget.id,
            interval=widget.refresh_interval,
            next_run=now if run_immediately else now + widget.refresh_interval,
            signature=widget.fetch_signature(),
            generation=generation,
        )
        self._timers[widget.id] = timer
        return timer

    def cancel(self, widget_id: str) -> None:
        self._timers.pop(widget_id, None)
        self._generations[widget_id] = self._generations.get(widget_id, 0) + 1

    def sync(self, widgets: list[WidgetSpec]) -> None:
        """Match timers to the current widget list."""
        current_ids = {widget.id for widget in widgets}
        for widget_id in list(self._timers):
            if widget_id not in current_ids:
                logger.info(f"Widget {widget_id} removed, cancelling refresh")
                self.cancel(widget_id)

        for widget in widgets:
            timer = self._timers.get(widget.id)
            if timer is None and widget.refresh_interval <= 0:
                continue
            if timer is None or timer.signature != widget.fetch_signature():
                self.schedule(widget)

    def due(self) -> list[str]:
        now = self.clock()
        return [timer.widget_id for timer in self._timers.values() if timer.next_run <= now]

    def begin(self, widget_id: str) -> int:
        """Mark a refresh as started; returns the token to pass to ``accept``."""
        timer = self._timers[widget_id]
        timer.next_run = self.clock() + timer.interval
        return timer.generation

    def accept(self, widget_id: str, token: int) -> bool:
        timer = self._timers.get(widget_id)
        return timer is not None and timer.generation == token

    def seconds_until_next(self) -> float | None:
        if not self._timers:
            return None
        return max(min(timer.next_run for timer in self._timers.values()) - self.clock(), 0)


def latest_render_key(widget_id: str) -> str:
    return f"widget-render:{widget_id}"


class WidgetRefresher:
    """
    Single-threaded refresh loop body.

    Each cycle reloads the dashboard, syncs timers, and renders every due
    widget. The dashboard is reloaded again after each fetch so a widget
    that was edited or removed meanwhile has its result dropped.
    """

    def __init__(self, store, service, result_cache, schedule: RefreshSchedule | None = None):
        self.store = store
        self.service = service
        self.result_cache = result_cache
        self.schedule = schedule or RefreshSchedule()

    def run_cycle(self) -> list[str]:
        """Refresh due widgets; returns ids whose results were stored."""
        self.store.load()
        self.schedule.sync(self.store.widgets)

        refreshed = []
        for widget_id in self.schedule.due():
            try:
                widget = self.store.get_widget(widget_id)
            except WidgetNotFound:
                self.schedule.cancel(widget_id)
                continue

            if widget_id not in self.schedule:
                # disabled or removed by an earlier fetch in this cycle
                continue

            token = self.schedule.begin(widget_id)
            render = render_widget(widget, self.service)

            self.store.load()
            self.schedule.sync(self.store.widgets)
            if not self.schedule.accept(widget_id, token):
                logger.info(f"Discarding stale refresh result for widget {widget_id}")
                continue

            self.result_cache.set(latest_render_key(widget_id), render.asdict(), timeout=None)
            refreshed.append(widget_id)

        if refreshed:
            logger.info(f"Refreshed {len(refreshed)} widgets")
        return refreshed
