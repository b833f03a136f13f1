"""Layout of a table projection: grid or cards, JSON or HTML.

Two mutually exclusive presentations of the same page of rows:
- grid: every column, header with sort indicators, trailing actions column
- cards: only columns not hidden on narrow viewports, the first one
  emphasized as the card title

The presentation is picked from the viewport width. Both show the empty
message when the page has no rows.
"""

import os
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .schemas import (
    ColumnHeader,
    LayoutMode,
    PageInfo,
    RenderedCell,
    RenderedRow,
    SortDirection,
    TableState,
    TableViewResponse,
)
from .view import ColumnSpec, Projection, TabularView

# Viewports narrower than this get the card layout
MOBILE_BREAKPOINT = int(os.environ.get("CLASSDESK_MOBILE_BREAKPOINT", "768"))

DEFAULT_EMPTY_MESSAGE = "No results found"

TEMPLATES_DIR = Path(__file__).parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

SORT_INDICATORS = {
    SortDirection.ASC: "↑",
    SortDirection.DESC: "↓",
}


def choose_layout(viewport_width: Optional[int], breakpoint: int = MOBILE_BREAKPOINT) -> LayoutMode:
    """Grid at or above the breakpoint (or when the width is unknown), cards below."""
    if viewport_width is None or viewport_width >= breakpoint:
        return LayoutMode.GRID
    return LayoutMode.CARDS


def build_headers(view: TabularView) -> list[ColumnHeader]:
    headers = []
    for c in view.columns:
        sorted_here = view.state.sort_key == c.key
        headers.append(
            ColumnHeader(
                key=c.key,
                label=c.label,
                sortable=c.sortable,
                hide_on_mobile=c.hide_on_mobile,
                sort_direction=view.state.sort_direction if sorted_here else None,
                indicator=SORT_INDICATORS[view.state.sort_direction] if sorted_here else "",
            )
        )
    return headers


def build_page_info(projection: Projection) -> PageInfo:
    return PageInfo(
        page=projection.page,
        page_size=projection.page_size,
        total_pages=projection.total_pages,
        total_rows=projection.total_rows,
        start_index=projection.start_index,
        end_index=projection.end_index,
        has_previous=projection.has_previous,
        has_next=projection.has_next,
        show_controls=projection.total_pages > 1,
    )


def _cell(column: ColumnSpec, row: Any) -> RenderedCell:
    return RenderedCell(
        key=column.key,
        label=column.label,
        value=column.value(row),
        display=str(column.display(row)),
    )


def build_rows(
    view: TabularView,
    projection: Projection,
    layout: LayoutMode,
    row_href: Optional[Callable[[Any], str]] = None,
) -> list[RenderedRow]:
    """Render the page rows for one layout."""
    columns: Sequence[ColumnSpec] = view.columns
    if layout == LayoutMode.CARDS:
        columns = view.visible_columns

    rendered = []
    for row in projection.page_rows:
        cells = [_cell(c, row) for c in columns]
        title = None
        if layout == LayoutMode.CARDS and cells:
            title, cells = cells[0], cells[1:]
        rendered.append(
            RenderedRow(
                row_id=view.id_of(row),
                clickable=view.rows_clickable,
                select_href=row_href(row) if (row_href and view.rows_clickable) else None,
                title=title,
                cells=cells,
                actions=view.actions_for(row),
            )
        )
    return rendered


def build_table_response(
    view: TabularView,
    rows: Sequence[Any],
    table_key: str,
    table_name: str,
    viewport_width: Optional[int] = None,
    empty_message: str = DEFAULT_EMPTY_MESSAGE,
    row_href: Optional[Callable[[Any], str]] = None,
    export_url: Optional[str] = None,
) -> TableViewResponse:
    """Project ``rows`` through ``view`` and package the result for the API."""
    projection = view.project(rows)
    layout = choose_layout(viewport_width)
    state = view.state

    return TableViewResponse(
        table_key=table_key,
        table_name=table_name,
        layout=layout,
        state=TableState(
            search=state.search,
            sort_key=state.sort_key,
            sort_direction=state.sort_direction,
            page=state.page,
        ),
        columns=build_headers(view),
        rows=build_rows(view, projection, layout, row_href=row_href),
        page_info=build_page_info(projection),
        empty=projection.is_empty,
        empty_message=empty_message,
        export_url=export_url,
    )


def render_html(
    view: TabularView,
    rows: Sequence[Any],
    title: str = "",
    viewport_width: Optional[int] = None,
    empty_message: str = DEFAULT_EMPTY_MESSAGE,
    row_href: Optional[Callable[[Any], str]] = None,
    export_url: Optional[str] = None,
) -> str:
    """Render the current page as an HTML fragment.

    Cell displays produced by markup renderers (badges) are inserted as-is;
    everything else is escaped.
    """
    projection = view.project(rows)
    layout = choose_layout(viewport_width)

    def display_rows(columns: Sequence[ColumnSpec]) -> list[dict[str, Any]]:
        return [
            {
                "id": view.id_of(row),
                "href": row_href(row) if (row_href and view.rows_clickable) else None,
                "cells": [(c.label, c.display(row)) for c in columns],
                "actions": view.actions_for(row),
            }
            for row in projection.page_rows
        ]

    columns = view.columns if layout == LayoutMode.GRID else view.visible_columns
    template = _env.get_template("table.html")
    return template.render(
        title=title,
        layout=layout.value,
        headers=build_headers(view),
        rows=display_rows(columns),
        has_actions=view.row_actions is not None,
        clickable=view.rows_clickable,
        page_info=build_page_info(projection),
        search=view.state.search,
        empty=projection.is_empty,
        empty_message=empty_message,
        export_url=export_url,
    )
