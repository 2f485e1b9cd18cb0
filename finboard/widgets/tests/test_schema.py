from finboard.widgets.schema import filter_fields, infer_fields, infer_value_type
from finboard.widgets.types import ValueType


def _paths(fields):
    return [field.path for field in fields]


def test_infer_fields_flattens_nested_objects():
    fields = infer_fields({"symbol": "TCS", "price": {"current": 3850.25, "currency": "INR"}, "open": True})

    assert _paths(fields) == ["symbol", "price.current", "price.currency", "open"]
    assert [f.value_type for f in fields] == [
        ValueType.string,
        ValueType.number,
        ValueType.string,
        ValueType.boolean,
    ]
    assert fields[1].label == "current"
    assert fields[1].sample_value == 3850.25


def test_infer_fields_array_of_objects_at_root():
    document = [{"symbol": "TCS", "price": 1}, {"symbol": "INFY", "price": 2}]
    fields = infer_fields(document)

    assert _paths(fields) == ["root", "symbol", "price"]
    assert fields[0].value_type == ValueType.array
    assert fields[0].label == "Array"
    assert fields[0].sample_value == document


def test_infer_fields_array_sample_sizes():
    rows = [{"n": i} for i in range(10)]
    fields = infer_fields(rows)
    assert len(fields[0].sample_value) == 3

    fields = infer_fields(list(range(10)))
    assert len(fields) == 1
    assert fields[0].sample_value == [0, 1, 2, 3, 4]

    fields = infer_fields({"history": list(range(10))})
    assert fields[0].path == "history"
    assert fields[0].sample_value == [0, 1, 2]


def test_infer_fields_empty_and_null_documents():
    assert infer_fields(None) == []
    assert infer_fields([]) == []
    assert infer_fields({}) == []


def test_infer_fields_null_leaf_is_object():
    fields = infer_fields({"dividend": None})
    assert len(fields) == 1
    assert fields[0].value_type == ValueType.object
    assert fields[0].sample_value is None


def test_infer_fields_primitive_document():
    fields = infer_fields(42)
    assert len(fields) == 1
    assert fields[0].path == "root"
    assert fields[0].label == "Value"
    assert fields[0].value_type == ValueType.number


def test_infer_fields_depth_bound():
    document = value = {}
    for level in range(10):
        value[f"level{level}"] = {}
        value = value[f"level{level}"]
    value["leaf"] = 1

    assert infer_fields(document, max_depth=5) == []

    fields = infer_fields(document, max_depth=11)
    assert len(fields) == 1
    assert fields[0].path.count(".") == 10


def test_infer_fields_depth_bound_keeps_shallow_fields():
    document = {"a": 1, "b": {"c": {"d": {"e": {"f": {"g": 2}}}}}}
    assert _paths(infer_fields(document, max_depth=5)) == ["a"]


def test_infer_value_type():
    assert infer_value_type(True) == ValueType.boolean
    assert infer_value_type(0) == ValueType.number
    assert infer_value_type(1.5) == ValueType.number
    assert infer_value_type("x") == ValueType.string
    assert infer_value_type([]) == ValueType.array
    assert infer_value_type({}) == ValueType.object


def test_filter_fields():
    fields = infer_fields({"data": [{"price": 1, "volume": 2}], "meta": {"price_source": "nse"}})

    assert _paths(filter_fields(fields, search="PRICE")) == ["meta.price_source"]
    assert _paths(filter_fields(fields, arrays_only=True)) == ["data"]
    assert filter_fields(fields) == fields
