from django.urls import include, path

from finboard.widgets.views import ThemeView

app_name = "api"
urlpatterns = [
    path("widgets/", include("finboard.widgets.urls")),
    path("dashboard/theme/", ThemeView.as_view(), name="theme"),
    path("portfolio/", include("finboard.portfolio.urls")),
]
