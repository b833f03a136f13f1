"""API routes for table views.

Each request carries the view state (search, sort, direction, page) in its
query string; the server projects the current records through the table's
definition and returns the page as JSON, as an HTML fragment, or the whole
filtered and sorted result as a CSV download.
"""

import logging
from dataclasses import replace
from typing import Any, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import HTMLResponse, Response

from classdesk.records.store import get_record_store
from classdesk.tables.builder import build_view, record_href
from classdesk.tables.layout import build_table_response, render_html
from classdesk.tables.registry import get_table_registry
from classdesk.tables.schemas import (
    SortDirection,
    TableDefinition,
    TableSummary,
    TableViewResponse,
)
from classdesk.tables.view import TabularView, ViewState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tables", tags=["tables"])


def _get_or_404(table_key: str) -> TableDefinition:
    """Get a table definition by key or raise 404."""
    registry = get_table_registry()
    table = registry.get(table_key)
    if table is None:
        available = registry.list_keys()
        raise HTTPException(
            status_code=404,
            detail=f"Table '{table_key}' not found. Available: {available}",
        )
    return table


def _load_rows(table: TableDefinition) -> list[dict[str, Any]]:
    try:
        return get_record_store().list_records(table.collection)
    except ValueError as e:
        logger.error(f"Table {table.table_key} points at a missing collection: {e}")
        raise HTTPException(status_code=500, detail=str(e))


def _open_view(
    table: TableDefinition,
    search: Optional[str],
    sort: Optional[str],
    direction: SortDirection,
    page: int = 1,
    page_size: Optional[int] = None,
) -> TabularView:
    """Build a view whose state comes from the request.

    Sorting on a non-sortable column is ignored; an unknown column is a 400.
    """
    view = build_view(table, page_size=page_size)
    state = ViewState(search=search or "", page=page)

    if sort:
        column = view.column(sort)
        if column is None:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown sort column '{sort}'. Available: {[c.key for c in view.columns]}",
            )
        if column.sortable:
            state = replace(state, sort_key=column.key, sort_direction=direction)

    # The page is clamped against the actual rows when the view is projected
    view.state = state
    return view


def _export_url(table: TableDefinition, view: TabularView) -> str:
    params = {}
    if view.state.search:
        params["search"] = view.state.search
    if view.state.sort_key:
        params["sort"] = view.state.sort_key
        params["direction"] = view.state.sort_direction.value
    query = f"?{urlencode(params)}" if params else ""
    return f"/v1/tables/{table.table_key}/export{query}"


def _row_href(table: TableDefinition):
    if not table.selectable:
        return None
    return lambda row: record_href(table.collection, row)


# ── List / detail ────────────────────────────────────────


@router.get("", response_model=list[TableSummary])
async def list_tables(
    collection: Optional[str] = Query(None, description="Filter by record collection"),
):
    """List all table definitions (summaries)."""
    return get_table_registry().list_summaries(collection=collection)


@router.get("/{table_key}", response_model=TableDefinition)
async def get_table(table_key: str):
    """Get a single table definition by key."""
    return _get_or_404(table_key)


# ── Projection ───────────────────────────────────────────


@router.get("/{table_key}/view", response_model=TableViewResponse)
async def view_table(
    table_key: str,
    search: Optional[str] = Query(None, description="Free-text search over the table's search keys"),
    sort: Optional[str] = Query(None, description="Column key to sort by"),
    direction: SortDirection = Query(SortDirection.ASC),
    page: int = Query(1, description="1-based page; out-of-range values are clamped"),
    page_size: Optional[int] = Query(None, description="Override the table's page size"),
    viewport_width: Optional[int] = Query(None, description="Client width in px; picks grid or cards"),
):
    """Get one page of a table as JSON.

    The returned state is the effective one: the page is clamped to the
    range of the filtered rows.

    Example: GET /v1/tables/students/view?search=chen&sort=name&page=1
    """
    table = _get_or_404(table_key)
    view = _open_view(table, search, sort, direction, page, page_size)
    rows = _load_rows(table)

    return build_table_response(
        view,
        rows,
        table_key=table.table_key,
        table_name=table.table_name,
        viewport_width=viewport_width,
        empty_message=table.empty_message,
        row_href=_row_href(table),
        export_url=_export_url(table, view),
    )


@router.get("/{table_key}/render", response_class=HTMLResponse)
async def render_table(
    table_key: str,
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: SortDirection = Query(SortDirection.ASC),
    page: int = Query(1),
    page_size: Optional[int] = Query(None),
    viewport_width: Optional[int] = Query(None),
):
    """Get one page of a table as an HTML fragment (grid or cards)."""
    table = _get_or_404(table_key)
    view = _open_view(table, search, sort, direction, page, page_size)
    rows = _load_rows(table)

    html = render_html(
        view,
        rows,
        title=table.table_name,
        viewport_width=viewport_width,
        empty_message=table.empty_message,
        row_href=_row_href(table),
        export_url=_export_url(table, view),
    )
    return HTMLResponse(content=html)


# ── Export ───────────────────────────────────────────────


@router.get("/{table_key}/export")
async def export_table(
    table_key: str,
    search: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
    direction: SortDirection = Query(SortDirection.ASC),
):
    """Download the filtered and sorted table (every page) as CSV."""
    table = _get_or_404(table_key)
    view = _open_view(table, search, sort, direction)
    rows = _load_rows(table)

    export = view.export_csv(rows)
    logger.info(f"Exported table {table_key} as {export.filename}")
    return Response(
        content=export.encode(),
        media_type=f"{export.media_type}; charset=utf-8",
        headers={"Content-Disposition": export.content_disposition},
    )
