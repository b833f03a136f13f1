"""Table definition schemas - declarative configuration for tabular pages.

A TableDefinition says: this record collection -> these columns, these
search keys, this page size, this export name. Definitions are loaded from
JSON files; renderers are referenced by name and resolved at load time.

The response models describe one computed projection as served by the API.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class SortDirection(str, Enum):
    """Sort order for the active sort column."""
    ASC = "asc"
    DESC = "desc"


class LayoutMode(str, Enum):
    """Presentation chosen from the viewport width."""
    GRID = "grid"
    CARDS = "cards"


ROW_ACTIONS = {
    "view": ("View", "GET"),
    "edit": ("Edit", "PATCH"),
    "delete": ("Delete", "DELETE"),
}


class ColumnDefinition(BaseModel):
    """One presented attribute of a table."""

    key: str = Field(
        ...,
        description="Record attribute name, or a synthetic name for computed columns",
    )
    label: str = Field(..., description="Header / card label")
    sortable: bool = Field(default=False)
    hide_on_mobile: bool = Field(
        default=False,
        description="Omit from the card layout (still exported)",
    )
    renderer: Optional[str] = Field(
        default=None,
        description="Named display renderer: 'badge', 'date', 'datetime', "
        "'currency', 'score', 'time_range', 'badge_list', 'text'",
    )
    renderer_options: dict[str, Any] = Field(
        default_factory=dict,
        description="Renderer-specific options (variants, empty placeholder, ...)",
    )


class TableDefinition(BaseModel):
    """Declarative specification of a tabular page over one collection."""

    # Identity
    table_key: str = Field(..., description="Unique identifier (snake_case, e.g. 'students')")
    table_name: str = Field(..., description="Human-readable page title")
    description: str = Field(default="")

    # Data
    collection: str = Field(..., description="Record collection the rows come from")
    columns: list[ColumnDefinition] = Field(..., min_length=1)
    search_keys: list[str] = Field(
        default_factory=list,
        description="Attributes matched by the free-text search",
    )

    # Behaviour
    page_size: int = Field(default=10, ge=1)
    export_file_name: str = Field(default="export", description="CSV base name, no extension")
    row_actions: list[str] = Field(
        default_factory=list,
        description="Trailing per-row actions: 'view', 'edit', 'delete'",
    )
    selectable: bool = Field(
        default=True,
        description="Whether activating a row opens the record",
    )
    empty_message: str = Field(default="No results found")

    @model_validator(mode="after")
    def validate_columns(self) -> "TableDefinition":
        """Column keys must be unique and row actions known."""
        keys = [c.key for c in self.columns]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"Duplicate column keys: {', '.join(duplicates)}")
        unknown = [a for a in self.row_actions if a not in ROW_ACTIONS]
        if unknown:
            raise ValueError(
                f"Unknown row actions: {', '.join(unknown)}. "
                f"Available: {', '.join(ROW_ACTIONS)}"
            )
        return self


class TableSummary(BaseModel):
    """Lightweight table listing entry."""

    table_key: str
    table_name: str
    description: str = ""
    collection: str
    column_count: int = 0
    sortable_columns: list[str] = Field(default_factory=list)
    search_keys: list[str] = Field(default_factory=list)
    page_size: int = 10


# ── Projection responses ─────────────────────────────────


class RowAction(BaseModel):
    """A supplementary control rendered in a row's trailing area."""

    name: str
    label: str
    method: str = "GET"
    href: str


class TableState(BaseModel):
    """Effective view state after clamping."""

    search: str = ""
    sort_key: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASC
    page: int = 1


class ColumnHeader(BaseModel):
    key: str
    label: str
    sortable: bool = False
    hide_on_mobile: bool = False
    sort_direction: Optional[SortDirection] = Field(
        default=None,
        description="Set on the currently sorted column",
    )
    indicator: str = Field(default="", description="'↑' or '↓' on the sorted column")


class RenderedCell(BaseModel):
    key: str
    label: str
    value: Any = None
    display: str = ""


class RenderedRow(BaseModel):
    row_id: str
    clickable: bool = False
    select_href: Optional[str] = None
    title: Optional[RenderedCell] = Field(
        default=None,
        description="Emphasized first visible column (card layout only)",
    )
    cells: list[RenderedCell] = Field(default_factory=list)
    actions: list[RowAction] = Field(default_factory=list)


class PageInfo(BaseModel):
    page: int
    page_size: int
    total_pages: int
    total_rows: int
    start_index: int = Field(description="1-based index of the first row shown (0 when empty)")
    end_index: int
    has_previous: bool
    has_next: bool
    show_controls: bool = Field(description="Pagination controls render only with more than one page")


class TableViewResponse(BaseModel):
    """One computed projection of a table."""

    table_key: str
    table_name: str
    layout: LayoutMode
    state: TableState
    columns: list[ColumnHeader]
    rows: list[RenderedRow]
    page_info: PageInfo
    empty: bool
    empty_message: str
    export_url: Optional[str] = None
