"""
Dotted-path lookup into arbitrary JSON documents.

Paths use the same convention the schema inferrer emits: segments joined by
``.`` with no array indices. When a segment is applied to a list, the lookup
implicitly descends into the first element, so ``quotes.price`` against
``{"quotes": [{"price": 1}, {"price": 2}]}`` reads ``1``. Single-value (card)
display therefore only ever sees the first element of an array.
"""

from typing import Any

from finboard.widgets.types import ROOT_PATH


def is_root_path(path: str | None) -> bool:
    return not path or path == ROOT_PATH


def resolve(document: Any, path: str | None) -> Any:
    """
    Resolve a dotted path against a JSON value.

    Args:
        document: Parsed JSON (dict, list or scalar)
        path: Dot-separated path, empty or "root" for the document itself

    Returns:
        The value at the path, or None if any step is missing
    """
    if is_root_path(path):
        return document

    current = document
    for key in path.split("."):
        if current is None:
            return None
        if isinstance(current, list):
            current = current[0] if current else None
        if isinstance(current, dict):
            current = current.get(key)
        else:
            return None
    return current
