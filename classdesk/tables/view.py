"""Tabular view state and projection.

TabularView owns the transient search / sort / page state of one table and
derives the filtered, sorted and paginated projection of whatever rows the
caller hands it. The state transitions are pure functions over ViewState,
so they can be exercised without rendering anything.

Projection steps:
1. Filter: keep rows where any search key contains the query (case-insensitive)
2. Sort: stable three-way comparison on the raw sort-key values
3. Paginate: fixed-size slice of the sorted rows, page clamped to range
"""

import math
from dataclasses import dataclass, replace
from functools import cmp_to_key
from typing import Any, Callable, Generic, Iterable, Optional, Sequence, TypeVar

from .csv_export import CsvExport, build_export
from .schemas import SortDirection
from .values import compare_values, field_accessor, stringify

RowT = TypeVar("RowT")

DEFAULT_PAGE_SIZE = 10


@dataclass
class ColumnSpec(Generic[RowT]):
    """How one attribute is labeled, read, sorted and rendered."""

    key: str
    label: str
    accessor: Optional[Callable[[RowT], Any]] = None
    render: Optional[Callable[[RowT], Any]] = None
    sortable: bool = False
    hide_on_mobile: bool = False

    def __post_init__(self) -> None:
        if self.accessor is None:
            self.accessor = field_accessor(self.key)

    def value(self, row: RowT) -> Any:
        """Raw attribute value (used for search, sort and export)."""
        return self.accessor(row)

    def display(self, row: RowT) -> Any:
        """Presentational value: the renderer's output, else the value as text."""
        if self.render is not None:
            return self.render(row)
        return stringify(self.value(row))


@dataclass(frozen=True)
class ViewState:
    search: str = ""
    sort_key: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASC
    page: int = 1


@dataclass
class Projection(Generic[RowT]):
    """Filtered + sorted rows and the current page slice of them."""

    rows: list[RowT]
    page_rows: list[RowT]
    page: int
    page_size: int
    total_pages: int

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def start_index(self) -> int:
        if not self.page_rows:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        return min(self.page * self.page_size, self.total_rows)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def is_empty(self) -> bool:
        return not self.page_rows


# ── Pure pieces ──────────────────────────────────────────


def page_count(total_rows: int, page_size: int) -> int:
    return max(1, math.ceil(total_rows / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    return max(1, min(page, total_pages))


def filter_rows(
    rows: Iterable[RowT],
    search: str,
    accessors: Sequence[Callable[[RowT], Any]],
) -> list[RowT]:
    """Keep rows where any searchable value contains ``search``.

    With no query or no searchable keys every row is kept. None values
    never match.
    """
    if not search or not accessors:
        return list(rows)

    needle = search.lower()

    def _matches(row: RowT) -> bool:
        for accessor in accessors:
            value = accessor(row)
            if value is not None and needle in stringify(value).lower():
                return True
        return False

    return [row for row in rows if _matches(row)]


def sort_rows(
    rows: Iterable[RowT],
    accessor: Callable[[RowT], Any],
    direction: SortDirection = SortDirection.ASC,
) -> list[RowT]:
    """Stable sort on raw values; descending inverts the comparator, not the list."""
    sign = -1 if direction == SortDirection.DESC else 1
    return sorted(
        rows,
        key=cmp_to_key(lambda a, b: sign * compare_values(accessor(a), accessor(b))),
    )


def paginate(rows: Sequence[RowT], page: int, page_size: int) -> list[RowT]:
    return list(rows[(page - 1) * page_size:page * page_size])


# ── State transitions ────────────────────────────────────


def apply_search(state: ViewState, query: str) -> ViewState:
    """Set the search text; always returns to the first page."""
    return replace(state, search=query or "", page=1)


def toggle_sort(state: ViewState, column: ColumnSpec) -> ViewState:
    """Sort by ``column``: a new column starts ascending, the same column flips."""
    if not column.sortable:
        return state
    if state.sort_key == column.key:
        flipped = SortDirection.DESC if state.sort_direction == SortDirection.ASC else SortDirection.ASC
        return replace(state, sort_direction=flipped)
    return replace(state, sort_key=column.key, sort_direction=SortDirection.ASC)


def goto_page(state: ViewState, page: int, total_pages: int) -> ViewState:
    return replace(state, page=clamp_page(page, total_pages))


def next_page(state: ViewState, total_pages: int) -> ViewState:
    return goto_page(state, state.page + 1, total_pages)


def previous_page(state: ViewState) -> ViewState:
    return replace(state, page=max(1, state.page - 1))


def project(
    rows: Iterable[RowT],
    columns: Sequence[ColumnSpec],
    state: ViewState,
    search_keys: Sequence[str] = (),
    page_size: int = DEFAULT_PAGE_SIZE,
) -> tuple[Projection, ViewState]:
    """Compute the projection for ``state``.

    Returns the projection and the state with its page clamped to the
    projection's page range, which differs from ``state`` when the rows
    shrank since the page was chosen.
    """
    page_size = max(1, page_size)
    by_key = {c.key: c for c in columns}

    search_accessors = [
        by_key[k].accessor if k in by_key else field_accessor(k)
        for k in search_keys
    ]
    result = filter_rows(rows, state.search, search_accessors)

    if state.sort_key:
        sort_column = by_key.get(state.sort_key)
        accessor = sort_column.accessor if sort_column else field_accessor(state.sort_key)
        result = sort_rows(result, accessor, state.sort_direction)

    total_pages = page_count(len(result), page_size)
    effective = goto_page(state, state.page, total_pages)

    projection = Projection(
        rows=result,
        page_rows=paginate(result, effective.page, page_size),
        page=effective.page,
        page_size=page_size,
        total_pages=total_pages,
    )
    return projection, effective


# ── Stateful view ────────────────────────────────────────


class TabularView(Generic[RowT]):
    """Search / sort / paginate / export over caller-supplied rows.

    Usage:
        view = TabularView(columns, search_keys=["name", "email"])
        view.search("chen")
        view.sort_by("name")
        page = view.project(students)
        export = view.export_csv(students)

    Rows are passed in on every call and never stored; only the ViewState
    survives between calls.
    """

    def __init__(
        self,
        columns: Sequence[ColumnSpec],
        search_keys: Sequence[str] = (),
        page_size: int = DEFAULT_PAGE_SIZE,
        on_row_select: Optional[Callable[[RowT], Any]] = None,
        row_actions: Optional[Callable[[RowT], list]] = None,
        export_base_name: str = "export",
        row_id: Optional[Callable[[RowT], Any]] = None,
        state: Optional[ViewState] = None,
    ):
        self.columns = list(columns)
        self.search_keys = list(search_keys)
        # page_size below 1 is a configuration error; clamp rather than fail
        self.page_size = max(1, int(page_size))
        self.on_row_select = on_row_select
        self.row_actions = row_actions
        self.export_base_name = export_base_name
        self.row_id = row_id or field_accessor("id")
        self.state = state or ViewState()

    @property
    def visible_columns(self) -> list[ColumnSpec]:
        """Columns shown in the card layout."""
        return [c for c in self.columns if not c.hide_on_mobile]

    @property
    def rows_clickable(self) -> bool:
        return self.on_row_select is not None

    def column(self, key: str) -> Optional[ColumnSpec]:
        for c in self.columns:
            if c.key == key:
                return c
        return None

    def id_of(self, row: RowT) -> str:
        return stringify(self.row_id(row))

    # State transitions

    def search(self, query: str) -> ViewState:
        self.state = apply_search(self.state, query)
        return self.state

    def sort_by(self, key: str) -> ViewState:
        """Activate sorting on a column header.

        Raises:
            ValueError: If no column has this key
        """
        column = self.column(key)
        if column is None:
            raise ValueError(
                f"Unknown column '{key}'. Available: {[c.key for c in self.columns]}"
            )
        self.state = toggle_sort(self.state, column)
        return self.state

    def goto_page(self, page: int, rows: Sequence[RowT]) -> ViewState:
        self.state = goto_page(self.state, page, self.page_count(rows))
        return self.state

    def next_page(self, rows: Sequence[RowT]) -> ViewState:
        self.state = next_page(self.state, self.page_count(rows))
        return self.state

    def previous_page(self) -> ViewState:
        self.state = previous_page(self.state)
        return self.state

    # Derived data

    def filtered(self, rows: Sequence[RowT]) -> list[RowT]:
        """Filtered and sorted rows, before pagination."""
        return self.project(rows).rows

    def page_count(self, rows: Sequence[RowT]) -> int:
        return self.project(rows).total_pages

    def project(self, rows: Sequence[RowT]) -> Projection:
        """Compute the current projection, re-clamping the held page."""
        projection, self.state = project(
            rows,
            self.columns,
            self.state,
            search_keys=self.search_keys,
            page_size=self.page_size,
        )
        return projection

    # Row interaction

    def select_row(self, row: RowT) -> bool:
        """Activate a row; returns False when rows are not selectable."""
        if self.on_row_select is None:
            return False
        self.on_row_select(row)
        return True

    def actions_for(self, row: RowT) -> list:
        if self.row_actions is None:
            return []
        return list(self.row_actions(row))

    # Export

    def export_csv(self, rows: Sequence[RowT]) -> CsvExport:
        """Export the filtered and sorted rows (all pages, all columns)."""
        return build_export(self.filtered(rows), self.columns, self.export_base_name)
