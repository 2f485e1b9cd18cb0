import datetime

import pytest

from finboard.widgets.discovery import (
    build_chart_points,
    find_display_array,
    find_time_series,
    format_point_date,
    parse_point_date,
)
from finboard.widgets.tests.factories import FieldDescriptorFactory


class TestFindDisplayArray:
    def test_list_document_is_returned(self):
        rows = [{"a": 1}]
        assert find_display_array(rows) is rows

    def test_values_are_walked_in_key_order(self):
        document = {"meta": {"rows": [1, 2]}, "empty": [], "items": [3]}
        assert find_display_array(document) == [1, 2]

    def test_nested_object_searched_before_later_keys(self):
        assert find_display_array({"a": {"b": [1]}, "c": [2]}) == [1]
        assert find_display_array({"a": {"b": {}}, "c": [2]}) == [2]

    def test_nested_search_in_key_order(self):
        document = {"a": {"b": {"c": [1]}}, "d": {"e": [2]}}
        assert find_display_array(document) == [1]

    @pytest.mark.parametrize("document", [{}, {"a": []}, {"a": {"b": 1}}, "text", 5, None])
    def test_nothing_found(self, document):
        assert find_display_array(document) == []


class TestFindTimeSeries:
    def test_priority_key_beats_earlier_array(self):
        document = {"symbols": [{"s": "TCS"}], "prices": [{"close": 1}]}
        assert find_time_series(document) == [{"close": 1}]

    def test_priority_order(self):
        document = {"history": [{"v": 1}], "data": [{"v": 2}]}
        assert find_time_series(document) == [{"v": 2}]

    def test_empty_priority_array_is_skipped(self):
        document = {"data": [], "chart": {"values": [{"v": 1}]}}
        assert find_time_series(document) == [{"v": 1}]

    def test_list_of_objects(self):
        series = [{"v": 1}, {"v": 2}]
        assert find_time_series(series) is series

    def test_list_of_lists_is_searched(self):
        assert find_time_series([[1, 2], [{"v": 3}]]) == [{"v": 3}]

    def test_not_found(self):
        assert find_time_series({"a": 1, "b": [1, 2]}) == []


class TestBuildChartPoints:
    def test_series_points(self):
        document = {"data": [{"date": "2024-01-01", "close": 100}, {"date": "2024-01-02", "close": "101.5"}]}
        fields = [FieldDescriptorFactory(path="close", label="Close")]

        points = build_chart_points(document, fields)

        assert points == [
            {"name": "01/01/2024", "Close": 100},
            {"name": "01/02/2024", "Close": 101.5},
        ]

    def test_point_name_falls_back_to_index(self):
        points = build_chart_points([{"close": 1}, {"close": 2}], [FieldDescriptorFactory(path="close")])
        assert [p["name"] for p in points] == ["Point 1", "Point 2"]

    def test_non_numeric_values_are_left_out(self):
        points = build_chart_points([{"close": "n/a"}], [FieldDescriptorFactory(path="close", label="Close")])
        assert points == [{"name": "Point 1"}]

    def test_degenerate_point(self):
        fields = [FieldDescriptorFactory(path="price", label="Price")]
        assert build_chart_points({"price": 42}, fields) == [{"name": "Value", "Price": 42}]

    def test_degenerate_point_without_numeric_value(self):
        fields = [FieldDescriptorFactory(path="price", label="Price")]
        assert build_chart_points({"price": "closed"}, fields) == [{"name": "Value"}]

    def test_no_series_and_no_fields(self):
        assert build_chart_points({"price": 42}, []) == []

    def test_candle_points_include_ohlc(self):
        document = {"prices": [{"t": 1, "o": 10, "h": 12, "l": 9, "c": "11"}]}
        fields = [FieldDescriptorFactory(path="c", label="Close")]

        line = build_chart_points(document, fields, "line")
        candle = build_chart_points(document, fields, "candle")

        assert line == [{"name": "Point 1", "Close": 11.0}]
        assert candle == [
            {"name": "Point 1", "Close": 11.0, "ohlc_o": 10, "ohlc_h": 12, "ohlc_l": 9, "ohlc_c": 11.0}
        ]


class TestPointDates:
    def test_epoch_seconds_and_millis(self):
        expected = datetime.datetime(2024, 1, 1, tzinfo=datetime.UTC)
        assert parse_point_date(1704067200) == expected
        assert parse_point_date(1704067200000) == expected

    def test_unparseable_keeps_string(self):
        assert parse_point_date("not a date") is None
        assert format_point_date("not a date") == "not a date"

    def test_iso_string(self):
        assert format_point_date("2024-03-15T10:30:00Z") == "03/15/2024"
