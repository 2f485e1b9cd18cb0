"""
Heuristics for locating tabular and time-series data in API responses.

Both walks visit dict keys in insertion order and the first match wins, so
the key order of the upstream payload is part of the contract.
"""

import datetime
import logging
from typing import Any

from dateutil import parser as date_parser
from django.utils import formats

from finboard.widgets.formatting import coerce_number
from finboard.widgets.paths import resolve
from finboard.widgets.types import ChartType, FieldDescriptor

logger = logging.getLogger(__name__)

# Conventional names for the series array, checked before a blind search
TIME_SERIES_KEYS = ["data", "values", "series", "timeSeries", "history", "prices"]
# First present key names a chart point
DATE_KEYS = ["date", "time", "timestamp", "datetime", "x"]
OHLC_KEYS = ["open", "high", "low", "close", "o", "h", "l", "c"]

DEGENERATE_POINT_NAME = "Value"
# Numeric timestamps at or above this are milliseconds since the epoch
EPOCH_MILLIS_THRESHOLD = 1e11


def find_display_array(document: Any) -> list:
    """
    Find the array a table widget should display.

    A list document is returned as-is. For objects, values are walked in key
    order: a non-empty list is returned at once and a nested object is
    searched depth-first before moving on to later keys. Returns an empty
    list when nothing is found.
    """
    if isinstance(document, list):
        return document
    if not isinstance(document, dict):
        return []

    for value in document.values():
        if isinstance(value, list) and value:
            return value
        if isinstance(value, dict):
            found = find_display_array(value)
            if found:
                return found
    return []


def find_time_series(document: Any) -> list:
    """
    Find a chartable array of points.

    Prefers the conventional series keys over whatever array happens to come
    first, which avoids picking a metadata array over the actual series.
    """
    if isinstance(document, list):
        if document and isinstance(document[0], dict):
            return document
        for item in document:
            found = find_time_series(item)
            if found:
                return found
        return []

    if not isinstance(document, dict):
        return []

    for key in TIME_SERIES_KEYS:
        candidate = document.get(key)
        if isinstance(candidate, list) and candidate:
            return candidate

    for value in document.values():
        found = find_time_series(value)
        if found:
            return found
    return []


def build_chart_points(
    document: Any,
    fields: list[FieldDescriptor],
    chart_type: ChartType | str | None = None,
) -> list[dict]:
    """
    Map an API response to chart points keyed by field label.

    Falls back to a single point built from the first field when no series
    can be found, so a chart always has something to draw.
    """
    series = find_time_series(document)
    if not series:
        return _degenerate_points(document, fields)

    include_ohlc = chart_type == ChartType.candle
    return [_build_point(item, index, fields, include_ohlc) for index, item in enumerate(series)]


def _degenerate_points(document: Any, fields: list[FieldDescriptor]) -> list[dict]:
    if not fields:
        return []
    first = fields[0]
    point = {"name": DEGENERATE_POINT_NAME}
    number = coerce_number(resolve(document, first.path))
    if number is not None:
        point[first.label] = number
    logger.debug(f"No time series found, using single point from '{first.path}'")
    return [point]


def _build_point(item: Any, index: int, fields: list[FieldDescriptor], include_ohlc: bool) -> dict:
    point = {"name": _point_name(item, index)}

    for field in fields:
        number = coerce_number(resolve(item, field.path))
        if number is not None:
            point[field.label] = number

    if include_ohlc and isinstance(item, dict):
        for key in OHLC_KEYS:
            number = coerce_number(item.get(key))
            if number is not None:
                point[f"ohlc_{key}"] = number

    return point


def _point_name(item: Any, index: int) -> str:
    if isinstance(item, dict):
        for key in DATE_KEYS:
            raw = item.get(key)
            if raw:
                return format_point_date(raw)
    return f"Point {index + 1}"


def parse_point_date(raw: Any) -> datetime.datetime | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int | float):
        seconds = raw / 1000 if abs(raw) >= EPOCH_MILLIS_THRESHOLD else raw
        try:
            return datetime.datetime.fromtimestamp(seconds, tz=datetime.UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(raw, str):
        try:
            return date_parser.parse(raw)
        except (ValueError, OverflowError):
            return None
    return None


def format_point_date(raw: Any) -> str:
    parsed = parse_point_date(raw)
    if parsed is None:
        return str(raw)
    return formats.date_format(parsed, "SHORT_DATE_FORMAT")
