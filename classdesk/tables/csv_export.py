"""CSV export of a table projection.

Computing the CSV text is pure; delivering it (an HTTP attachment, a file
on disk) is left to the caller. Export always uses the raw column values,
never the display renderers, and quotes a field only when it contains a
comma. Embedded quotes and newlines are passed through unchanged so that
existing consumers of this simple format keep working.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from .values import stringify

CSV_MEDIA_TYPE = "text/csv"
CSV_ENCODING = "utf-8"


@dataclass(frozen=True)
class CsvExport:
    """A materialized CSV download."""

    filename: str
    content: str
    media_type: str = CSV_MEDIA_TYPE

    def encode(self) -> bytes:
        return self.content.encode(CSV_ENCODING)

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def export_filename(base_name: str) -> str:
    return f"{base_name or 'export'}.csv"


def format_field(value: Any) -> str:
    text = stringify(value)
    if "," in text:
        return f'"{text}"'
    return text


def build_csv(rows: Iterable[Any], columns: Sequence[Any]) -> str:
    """Render rows as CSV text.

    Args:
        rows: Rows in export order (already filtered and sorted)
        columns: Column specs; every column is exported in order, using
            ``column.value(row)`` for the raw value

    Returns:
        Header line plus one line per row, joined with newlines
    """
    lines = [",".join(column.label for column in columns)]
    for row in rows:
        lines.append(",".join(format_field(column.value(row)) for column in columns))
    return "\n".join(lines)


def build_export(rows: Iterable[Any], columns: Sequence[Any], base_name: str = "export") -> CsvExport:
    return CsvExport(
        filename=export_filename(base_name),
        content=build_csv(rows, columns),
    )
