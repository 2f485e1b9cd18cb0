import uuid

from rest_framework import serializers

from finboard.widgets.projection import DEFAULT_PAGE_SIZE, SortDirection
from finboard.widgets.proxy import ProxyError, validate_url
from finboard.widgets.types import (
    ChartInterval,
    ChartType,
    DisplayMode,
    FieldDescriptor,
    FieldFormat,
    Theme,
    ValueType,
    WidgetSpec,
)


class UrlSerializer(serializers.Serializer):
    # scheme and host rules are enforced by the proxy so the error matches its message
    url = serializers.CharField()


class FieldDescriptorSerializer(serializers.Serializer):
    path = serializers.CharField()
    label = serializers.CharField(required=False, allow_blank=True, default="")
    type = serializers.ChoiceField(choices=[t.value for t in ValueType], default=ValueType.string.value)
    sample_value = serializers.JSONField(required=False, allow_null=True, default=None)
    format = serializers.ChoiceField(choices=[f.value for f in FieldFormat], required=False, allow_null=True)

    def to_internal_value(self, data):
        validated = super().to_internal_value(data)
        return FieldDescriptor.build(**validated)

    def to_representation(self, instance):
        return instance.asdict()


class WidgetSpecSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    api_url = serializers.CharField(max_length=2000)
    fields = FieldDescriptorSerializer(many=True, required=False, default=list)
    display_mode = serializers.ChoiceField(choices=[m.value for m in DisplayMode], default=DisplayMode.card.value)
    refresh_interval = serializers.IntegerField(min_value=0, default=30)
    chart_type = serializers.ChoiceField(choices=[c.value for c in ChartType], required=False, allow_null=True)
    chart_interval = serializers.ChoiceField(
        choices=[c.value for c in ChartInterval], required=False, allow_null=True
    )
    created_at = serializers.DateTimeField(read_only=True)
    last_updated = serializers.DateTimeField(read_only=True, allow_null=True)

    def validate_api_url(self, value):
        try:
            return validate_url(value)
        except ProxyError as e:
            raise serializers.ValidationError(e.message)

    def validate(self, attrs):
        display_mode = attrs.get("display_mode", getattr(self.instance, "display_mode", None))
        if display_mode == DisplayMode.chart and not attrs.get("chart_type", getattr(self.instance, "chart_type", None)):
            attrs["chart_type"] = ChartType.line.value
        return attrs

    def create(self, validated_data):
        return WidgetSpec(id=uuid.uuid4().hex, **validated_data)


class ReorderSerializer(serializers.Serializer):
    widget_ids = serializers.ListField(child=serializers.CharField())


class ThemeSerializer(serializers.Serializer):
    theme = serializers.ChoiceField(choices=[t.value for t in Theme])


class RenderOptionsSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, default="")
    sort = serializers.CharField(required=False, allow_blank=True, default="")
    direction = serializers.ChoiceField(choices=[d.value for d in SortDirection], default=SortDirection.asc.value)
    page = serializers.IntegerField(min_value=1, default=1)
    page_size = serializers.IntegerField(min_value=1, max_value=100, default=DEFAULT_PAGE_SIZE)
    cached = serializers.BooleanField(required=False, default=False)

    def table_options(self) -> dict:
        data = self.validated_data
        return {
            "search": data["search"],
            "sort_path": data["sort"] or None,
            "sort_direction": data["direction"],
            "page": data["page"],
            "page_size": data["page_size"],
        }
