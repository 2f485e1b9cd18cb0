"""
Schema inference over arbitrary JSON responses.

Walks an unknown document and produces a flat list of FieldDescriptor
objects that a user can pick from when configuring a widget. The walk is
depth-first in key insertion order and bounded by ``max_depth``.

Rules:
- nested objects are flattened, only their leaves (and array landmarks) are
  emitted
- an array of objects emits one descriptor for the array itself, then the
  fields of its first element under the same (unindexed) prefix, so a table
  widget can discover row-level fields from an example row
- an array of anything else emits only the array descriptor
"""

from typing import Any

from finboard.widgets.types import ROOT_PATH, FieldDescriptor, ValueType

DEFAULT_MAX_DEPTH = 5
OBJECT_ARRAY_SAMPLE_SIZE = 3
PRIMITIVE_ARRAY_SAMPLE_SIZE = 5


def infer_value_type(value: Any) -> ValueType:
    if isinstance(value, bool):
        return ValueType.boolean
    if isinstance(value, int | float):
        return ValueType.number
    if isinstance(value, str):
        return ValueType.string
    if isinstance(value, list):
        return ValueType.array
    # dicts and JSON null
    return ValueType.object


def infer_fields(
    document: Any,
    path_prefix: str = "",
    max_depth: int = DEFAULT_MAX_DEPTH,
    current_depth: int = 0,
) -> list[FieldDescriptor]:
    """
    Discover addressable fields in a JSON value.

    Args:
        document: Parsed JSON value
        path_prefix: Path of ``document`` inside the outer document
        max_depth: Recursion bound; nothing is emitted at or beyond it
        current_depth: Depth of ``document`` (used by the recursion)

    Returns:
        Field descriptors in depth-first document order
    """
    if current_depth >= max_depth or document is None:
        return []

    if isinstance(document, list):
        return _infer_array_fields(document, path_prefix, max_depth, current_depth)

    if isinstance(document, dict):
        fields = []
        for key, value in document.items():
            child_path = f"{path_prefix}.{key}" if path_prefix else key
            if isinstance(value, dict):
                fields.extend(infer_fields(value, child_path, max_depth, current_depth + 1))
            else:
                sample = value[:OBJECT_ARRAY_SAMPLE_SIZE] if isinstance(value, list) else value
                fields.append(
                    FieldDescriptor(
                        path=child_path,
                        label=key,
                        value_type=infer_value_type(value),
                        sample_value=sample,
                    )
                )
        return fields

    return [
        FieldDescriptor(
            path=path_prefix or ROOT_PATH,
            label=_label_for(path_prefix, "Value"),
            value_type=infer_value_type(document),
            sample_value=document,
        )
    ]


def _infer_array_fields(document: list, path_prefix: str, max_depth: int, current_depth: int) -> list[FieldDescriptor]:
    if not document:
        return []

    first_item = document[0]
    if not isinstance(first_item, dict):
        return [
            FieldDescriptor(
                path=path_prefix or ROOT_PATH,
                label=_label_for(path_prefix, "Array"),
                value_type=ValueType.array,
                sample_value=document[:PRIMITIVE_ARRAY_SAMPLE_SIZE],
            )
        ]

    fields = [
        FieldDescriptor(
            path=path_prefix or ROOT_PATH,
            label=_label_for(path_prefix, "Array"),
            value_type=ValueType.array,
            sample_value=document[:OBJECT_ARRAY_SAMPLE_SIZE],
        )
    ]
    fields.extend(infer_fields(first_item, path_prefix, max_depth, current_depth + 1))
    return fields


def _label_for(path_prefix: str, default: str) -> str:
    return path_prefix.rsplit(".", 1)[-1] if path_prefix else default


def filter_fields(fields: list[FieldDescriptor], search: str = "", arrays_only: bool = False) -> list[FieldDescriptor]:
    """Narrow a discovered field list the way the field picker does."""
    needle = search.strip().lower()
    result = []
    for field in fields:
        if arrays_only and field.value_type != ValueType.array:
            continue
        if needle and needle not in field.path.lower() and needle not in field.label.lower():
            continue
        result.append(field)
    return result
