"""
Django management command that keeps widget data fresh.

Runs each configured widget on its own refresh interval and stores the latest
render in the default cache, where the render endpoint can pick it up.

Usage:
    python manage.py refresh_widgets
    python manage.py refresh_widgets --once
"""

import time

from django.core.cache import cache
from django.core.management.base import BaseCommand

from finboard.widgets.refresh import WidgetRefresher
from finboard.widgets.service import get_binding_service
from finboard.widgets.store import DashboardStore

IDLE_SLEEP_SECONDS = 5


class Command(BaseCommand):
    help = "Refresh widget data on each widget's refresh interval"

    def add_arguments(self, parser):
        parser.add_argument(
            "--once",
            action="store_true",
            help="Run a single refresh cycle for the widgets that are due and exit",
        )

    def handle(self, *args, **options):
        refresher = WidgetRefresher(DashboardStore(), get_binding_service(), cache)

        if options["once"]:
            refreshed = refresher.run_cycle()
            if refreshed:
                self.stdout.write(self.style.SUCCESS(f"Refreshed {len(refreshed)} widgets"))
            else:
                self.stdout.write(self.style.WARNING("No widgets to refresh."))
            return

        self.stdout.write("Refreshing widgets, press Ctrl+C to stop...")
        try:
            while True:
                refresher.run_cycle()
                wait = refresher.schedule.seconds_until_next()
                time.sleep(IDLE_SLEEP_SECONDS if wait is None else max(wait, 0.1))
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING("Stopped."))
