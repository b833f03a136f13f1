"""Table registry: loads and serves table definitions from JSON files.

- JSON-per-file in definitions/ directory
- Lazy loading with _loaded guard
- In-memory dict keyed by table_key
- Global singleton via get_table_registry()

A definition is only registered if its renderers resolve, so a bad
definition file fails at load time instead of on the first request.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from .builder import build_columns
from .schemas import TableDefinition, TableSummary

logger = logging.getLogger(__name__)


class TableRegistry:
    """Registry of table definitions loaded from JSON files."""

    def __init__(self, definitions_dir: Optional[Path] = None):
        if definitions_dir is None:
            definitions_dir = Path(__file__).parent / "definitions"
        self.definitions_dir = definitions_dir
        self._tables: dict[str, TableDefinition] = {}
        self._loaded = False

    def load(self) -> None:
        """Load all table definitions from JSON files."""
        if self._loaded:
            return

        if not self.definitions_dir.exists():
            logger.warning(f"Table definitions directory not found: {self.definitions_dir}")
            self._loaded = True
            return

        for json_file in sorted(self.definitions_dir.glob("*.json")):
            try:
                with open(json_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                table = TableDefinition.model_validate(data)
                build_columns(table)
                self._tables[table.table_key] = table
                logger.debug(f"Loaded table: {table.table_key}")
            except Exception as e:
                logger.error(f"Failed to load table from {json_file}: {e}")

        self._loaded = True
        logger.info(f"Loaded {len(self._tables)} table definitions")

    def get(self, table_key: str) -> Optional[TableDefinition]:
        """Get a table definition by key."""
        self.load()
        return self._tables.get(table_key)

    def list_all(self) -> list[TableDefinition]:
        self.load()
        return list(self._tables.values())

    def list_summaries(self, collection: Optional[str] = None) -> list[TableSummary]:
        """List table summaries, optionally for one collection."""
        self.load()
        tables = self._tables.values()
        if collection:
            tables = [t for t in tables if t.collection == collection]
        return [
            TableSummary(
                table_key=t.table_key,
                table_name=t.table_name,
                description=t.description,
                collection=t.collection,
                column_count=len(t.columns),
                sortable_columns=[c.key for c in t.columns if c.sortable],
                search_keys=t.search_keys,
                page_size=t.page_size,
            )
            for t in sorted(tables, key=lambda t: t.table_key)
        ]

    def list_keys(self) -> list[str]:
        self.load()
        return list(self._tables.keys())

    def count(self) -> int:
        self.load()
        return len(self._tables)

    def reload(self) -> None:
        """Force reload all definitions."""
        self._loaded = False
        self._tables.clear()
        self.load()


# Global registry instance
_registry: Optional[TableRegistry] = None


def get_table_registry() -> TableRegistry:
    """Get the global table registry instance."""
    global _registry
    if _registry is None:
        _registry = TableRegistry()
        _registry.load()
    return _registry
