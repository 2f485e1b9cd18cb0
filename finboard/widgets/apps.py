from django.apps import AppConfig


class WidgetsConfig(AppConfig):
    name = "finboard.widgets"
    verbose_name = "Widgets"
