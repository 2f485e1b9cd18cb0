"""
Types shared by the widget binding pipeline.

A widget binds an arbitrary JSON API to a display mode. The pipeline never
knows the shape of the response up front, so everything it exchanges with
the outside world is either a plain JSON value or one of these small
dataclasses.
"""

import dataclasses
import datetime
from enum import StrEnum
from typing import Any

ROOT_PATH = "root"


class ValueType(StrEnum):
    string = "string"
    number = "number"
    boolean = "boolean"
    array = "array"
    object = "object"


class FieldFormat(StrEnum):
    none = "none"
    currency = "currency"
    percentage = "percentage"
    number = "number"
    compact = "compact"


class DisplayMode(StrEnum):
    card = "card"
    table = "table"
    chart = "chart"


class ChartType(StrEnum):
    line = "line"
    candle = "candle"


class ChartInterval(StrEnum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class Theme(StrEnum):
    light = "light"
    dark = "dark"


@dataclasses.dataclass
class FieldDescriptor:
    """A discovered or selected location inside a JSON document."""

    path: str
    label: str = ""
    value_type: ValueType = ValueType.string
    sample_value: Any = None
    format: FieldFormat | None = None

    def __post_init__(self):
        if not self.label:
            self.label = self.path.rsplit(".", 1)[-1] if self.path else ROOT_PATH
        self.value_type = ValueType(self.value_type)
        if self.format is not None:
            self.format = FieldFormat(self.format)

    def asdict(self) -> dict:
        return {
            "path": self.path,
            "label": self.label,
            "type": str(self.value_type),
            "sample_value": self.sample_value,
            "format": str(self.format) if self.format else None,
        }

    @classmethod
    def build(cls, path: str, label: str = "", type: str = "string", sample_value=None, format=None, **kwargs):
        return cls(path=path, label=label, value_type=ValueType(type), sample_value=sample_value, format=format)


@dataclasses.dataclass
class WidgetSpec:
    """Configuration of a single dashboard widget."""

    id: str
    name: str
    api_url: str
    fields: list[FieldDescriptor] = dataclasses.field(default_factory=list)
    display_mode: DisplayMode = DisplayMode.card
    refresh_interval: int = 30  # seconds, 0 disables refresh
    description: str = ""
    chart_type: ChartType | None = None
    chart_interval: ChartInterval | None = None
    created_at: datetime.datetime = dataclasses.field(default_factory=lambda: datetime.datetime.now(datetime.UTC))
    last_updated: datetime.datetime | None = None

    def __post_init__(self):
        self.display_mode = DisplayMode(self.display_mode)
        if self.chart_type is not None:
            self.chart_type = ChartType(self.chart_type)
        if self.chart_interval is not None:
            self.chart_interval = ChartInterval(self.chart_interval)

    def fetch_signature(self) -> tuple:
        """Everything that changes what a refresh cycle fetches or renders."""
        return (
            self.api_url,
            self.refresh_interval,
            self.display_mode,
            self.chart_type,
            tuple((f.path, f.label, f.format) for f in self.fields),
        )


@dataclasses.dataclass
class EndpointTestResult:
    success: bool
    data: Any = None
    fields: list[FieldDescriptor] | None = None
    error: str | None = None
    category: str | None = None

    def asdict(self) -> dict:
        result = {"success": self.success}
        if self.success:
            result["data"] = self.data
            result["fields"] = [field.asdict() for field in self.fields or []]
        else:
            result["error"] = self.error
            result["category"] = self.category
        return result
