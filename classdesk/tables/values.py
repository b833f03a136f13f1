"""Value access and comparison helpers shared by the view and CSV export.

Rows are either mappings (records straight from the store) or objects
(pydantic models, dataclasses). Attribute values are mixed primitives, so
stringification and ordering follow loose rules instead of raising.
"""

from collections.abc import Mapping
from typing import Any, Callable


def field_accessor(key: str) -> Callable[[Any], Any]:
    """Build an accessor that reads ``key`` from a mapping or an object.

    Missing attributes read as None.
    """

    def _get(row: Any) -> Any:
        if isinstance(row, Mapping):
            return row.get(key)
        return getattr(row, key, None)

    _get.__name__ = f"get_{key}"
    return _get


def stringify(value: Any) -> str:
    """Convert an attribute value to its display/export text.

    None becomes an empty string, booleans are lower-case, integral floats
    lose their fractional part and sequences are comma-joined.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    return str(value)


def compare_values(a: Any, b: Any) -> int:
    """Three-way comparison of raw attribute values.

    Missing values and values of incomparable types compare as equal, so a
    stable sort leaves those rows where they were.
    """
    if a is None or b is None:
        return 0
    try:
        if a < b:
            return -1
        if a > b:
            return 1
    except TypeError:
        return 0
    return 0
