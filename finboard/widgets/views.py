from django.core.cache import cache
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from finboard.widgets.proxy import ProxyError, WidgetProxy
from finboard.widgets.projection import render_widget
from finboard.widgets.refresh import latest_render_key
from finboard.widgets.serializers import (
    RenderOptionsSerializer,
    ReorderSerializer,
    ThemeSerializer,
    UrlSerializer,
    WidgetSpecSerializer,
)
from finboard.widgets.service import get_binding_service
from finboard.widgets.store import DashboardStore, WidgetNotFound


def _not_found(widget_id):
    return Response({"error": f"Widget {widget_id} not found"}, status=status.HTTP_404_NOT_FOUND)


class EndpointTestView(APIView):
    """Fetch a candidate API once and return its data with the discovered fields."""

    def post(self, request, *args, **kwargs):
        serializer = UrlSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = get_binding_service().test_endpoint(serializer.validated_data["url"])
        return Response(result.asdict())


class ProxyView(APIView):
    def post(self, request, *args, **kwargs):
        serializer = UrlSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            data = WidgetProxy().get_json(serializer.validated_data["url"])
        except ProxyError as e:
            return Response({"error": e.message}, status=e.status_code or status.HTTP_502_BAD_GATEWAY)
        return Response(data)


class WidgetListView(APIView):
    def get(self, request, *args, **kwargs):
        store = DashboardStore()
        return Response(WidgetSpecSerializer(store.widgets, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = WidgetSpecSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        widget = serializer.save()
        DashboardStore().add_widget(widget)
        return Response(WidgetSpecSerializer(widget).data, status=status.HTTP_201_CREATED)


class WidgetDetailView(APIView):
    def get(self, request, widget_id, *args, **kwargs):
        try:
            widget = DashboardStore().get_widget(widget_id)
        except WidgetNotFound:
            return _not_found(widget_id)
        return Response(WidgetSpecSerializer(widget).data)

    def patch(self, request, widget_id, *args, **kwargs):
        store = DashboardStore()
        try:
            widget = store.get_widget(widget_id)
        except WidgetNotFound:
            return _not_found(widget_id)

        serializer = WidgetSpecSerializer(widget, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        updated = store.update_widget(widget_id, **serializer.validated_data)
        return Response(WidgetSpecSerializer(updated).data)

    def delete(self, request, widget_id, *args, **kwargs):
        try:
            DashboardStore().remove_widget(widget_id)
        except WidgetNotFound:
            return _not_found(widget_id)
        cache.delete(latest_render_key(widget_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class WidgetReorderView(APIView):
    def post(self, request, *args, **kwargs):
        serializer = ReorderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        widgets = DashboardStore().reorder_widgets(serializer.validated_data["widget_ids"])
        return Response(WidgetSpecSerializer(widgets, many=True).data)


class WidgetRenderView(APIView):
    """
    Live projection of a widget for its display mode.

    With ``cached=true`` the latest result stored by the ``refresh_widgets``
    command is returned when there is one. Fetch failures are reported in the
    body with ``state: "error"``; the request itself still succeeds.
    """

    def get(self, request, widget_id, *args, **kwargs):
        options = RenderOptionsSerializer(data=request.query_params)
        options.is_valid(raise_exception=True)

        try:
            widget = DashboardStore().get_widget(widget_id)
        except WidgetNotFound:
            return _not_found(widget_id)

        if options.validated_data["cached"]:
            latest = cache.get(latest_render_key(widget_id))
            if latest is not None:
                return Response(latest)

        render = render_widget(widget, get_binding_service(), **options.table_options())
        return Response(render.asdict())


class ThemeView(APIView):
    def get(self, request, *args, **kwargs):
        return Response({"theme": str(DashboardStore().theme)})

    def put(self, request, *args, **kwargs):
        serializer = ThemeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        theme = DashboardStore().set_theme(serializer.validated_data["theme"])
        return Response({"theme": str(theme)})
