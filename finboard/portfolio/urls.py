from django.urls import path

from finboard.portfolio import views

app_name = "portfolio"

urlpatterns = [
    path("", views.PortfolioView.as_view(), name="detail"),
    path("refresh/", views.PortfolioRefreshView.as_view(), name="refresh"),
    path("import/", views.PortfolioImportView.as_view(), name="import"),
    path("reset/", views.PortfolioResetView.as_view(), name="reset"),
]
