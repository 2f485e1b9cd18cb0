from django.apps import AppConfig


class PortfolioConfig(AppConfig):
    name = "finboard.portfolio"
    verbose_name = "Portfolio"
