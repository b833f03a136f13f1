#!/usr/bin/env python3
"""Export a table view to a CSV file.

Applies the same search and sort as the /v1/tables/{key}/export endpoint and
writes every matching row (not just one page) to <export_file_name>.csv.

Usage:
    python scripts/export_table.py students
    python scripts/export_table.py fees --search tuition --sort due_date --desc
    python scripts/export_table.py grades --output-dir exports/

Reads from: classdesk/tables/definitions/*.json, the record seed file
Writes to:  <output-dir>/<export_file_name>.csv
"""

import argparse
import logging
import sys
from pathlib import Path

# Make the classdesk package importable when run from a checkout
sys.path.insert(0, str(Path(__file__).parent.parent))

from classdesk.records.store import get_record_store
from classdesk.tables.builder import build_view
from classdesk.tables.registry import get_table_registry

logger = logging.getLogger("export_table")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Export a table view to CSV")
    parser.add_argument("table_key", help="Table to export (e.g. students, fees)")
    parser.add_argument("--search", default="", help="Free-text search over the table's search keys")
    parser.add_argument("--sort", default=None, help="Column key to sort by")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--output-dir", default=".", help="Directory to write the CSV into")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")

    registry = get_table_registry()
    table = registry.get(args.table_key)
    if table is None:
        print(f"Unknown table '{args.table_key}'. Available: {', '.join(registry.list_keys())}")
        return 1

    view = build_view(table)
    view.search(args.search)
    if args.sort:
        try:
            view.sort_by(args.sort)
            if args.desc:
                view.sort_by(args.sort)
        except ValueError as e:
            print(str(e))
            return 1

    rows = get_record_store().list_records(table.collection)
    export = view.export_csv(rows)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / export.filename
    output_path.write_bytes(export.encode())

    logger.info(f"Wrote {len(view.filtered(rows))} rows to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
