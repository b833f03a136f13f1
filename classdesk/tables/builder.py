"""Turn a TableDefinition into a live TabularView.

Resolves named renderers into column display functions and declared row
actions into per-row action links pointing at the record endpoints.
"""

from typing import Any, Callable, Optional

from .schemas import ROW_ACTIONS, RowAction, TableDefinition
from .renderers import build_renderer
from .values import field_accessor, stringify
from .view import ColumnSpec, TabularView, ViewState

RECORDS_PREFIX = "/v1/records"


def record_href(collection: str, row: Any) -> str:
    """Link to a single record in the records API."""
    return f"{RECORDS_PREFIX}/{collection}/{stringify(field_accessor('id')(row))}"


def build_columns(definition: TableDefinition) -> list[ColumnSpec]:
    """Column specs for a definition.

    Raises:
        ValueError: If a column references an unknown renderer
    """
    columns = []
    for col in definition.columns:
        accessor = field_accessor(col.key)
        render = None
        if col.renderer:
            render = build_renderer(col.renderer, accessor, col.renderer_options)
        columns.append(
            ColumnSpec(
                key=col.key,
                label=col.label,
                accessor=accessor,
                render=render,
                sortable=col.sortable,
                hide_on_mobile=col.hide_on_mobile,
            )
        )
    return columns


def build_row_actions(definition: TableDefinition) -> Optional[Callable[[Any], list[RowAction]]]:
    if not definition.row_actions:
        return None

    def actions(row: Any) -> list[RowAction]:
        href = record_href(definition.collection, row)
        return [
            RowAction(
                name=name,
                label=ROW_ACTIONS[name][0],
                method=ROW_ACTIONS[name][1],
                href=href,
            )
            for name in definition.row_actions
        ]

    return actions


def build_view(
    definition: TableDefinition,
    state: Optional[ViewState] = None,
    page_size: Optional[int] = None,
    on_row_select: Optional[Callable[[Any], Any]] = None,
) -> TabularView:
    """Create a TabularView configured from ``definition``.

    Args:
        definition: Table definition
        state: Initial view state (default: fresh state)
        page_size: Override for the definition's page size
        on_row_select: Row activation callback; defaults to resolving the
            record link when the definition is selectable
    """
    if on_row_select is None and definition.selectable:
        def on_row_select(row: Any) -> str:
            return record_href(definition.collection, row)

    return TabularView(
        columns=build_columns(definition),
        search_keys=definition.search_keys,
        page_size=page_size or definition.page_size,
        on_row_select=on_row_select,
        row_actions=build_row_actions(definition),
        export_base_name=definition.export_file_name,
        state=state,
    )
