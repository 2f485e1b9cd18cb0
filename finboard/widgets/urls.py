from django.urls import path

from finboard.widgets import views

app_name = "widgets"

urlpatterns = [
    path("", views.WidgetListView.as_view(), name="list"),
    path("test/", views.EndpointTestView.as_view(), name="test"),
    path("proxy/", views.ProxyView.as_view(), name="proxy"),
    path("reorder/", views.WidgetReorderView.as_view(), name="reorder"),
    path("<str:widget_id>/", views.WidgetDetailView.as_view(), name="detail"),
    path("<str:widget_id>/render/", views.WidgetRenderView.as_view(), name="render"),
]
