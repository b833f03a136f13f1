"""In-memory record store seeded from YAML demo data.

Holds one ordered list of dict records per collection. Insertion order is
the default row order of every table view. Writes are validated against
the collection's pydantic model; the store is shared process state, so
all access goes through a lock.

Nothing is persisted: restarting the process restores the seed data.
"""

import logging
import os
import threading
import uuid
from pathlib import Path
from typing import Any, Optional

import yaml

from .schemas import COLLECTION_MODELS

logger = logging.getLogger(__name__)

DEFAULT_SEED_FILE = Path(__file__).parent / "seed" / "demo_records.yaml"
SEED_FILE = Path(os.environ.get("CLASSDESK_SEED_FILE", str(DEFAULT_SEED_FILE)))


class RecordStore:
    """Collections of validated records, keyed by collection name."""

    def __init__(self, seed_file: Optional[Path] = None):
        self.seed_file = seed_file if seed_file is not None else SEED_FILE
        self._collections: dict[str, list[dict[str, Any]]] = {
            name: [] for name in COLLECTION_MODELS
        }
        self._lock = threading.Lock()
        self._load_seed()

    def _load_seed(self) -> None:
        """Load seed records from YAML, skipping invalid entries."""
        if not self.seed_file.exists():
            logger.warning(f"Seed file not found: {self.seed_file}")
            return

        with open(self.seed_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        for name, records in data.items():
            model = COLLECTION_MODELS.get(name)
            if model is None:
                logger.warning(f"Ignoring unknown seed collection: {name}")
                continue
            for record in records or []:
                try:
                    self._collections[name].append(model.model_validate(record).model_dump())
                except Exception as e:
                    logger.error(f"Invalid seed record in {name}: {e}")

        logger.info(
            f"Seeded {sum(len(r) for r in self._collections.values())} records "
            f"across {len(self._collections)} collections"
        )

    def _records(self, collection: str) -> list[dict[str, Any]]:
        if collection not in self._collections:
            raise ValueError(
                f"Unknown collection '{collection}'. Available: {self.list_collections()}"
            )
        return self._collections[collection]

    def list_collections(self) -> list[str]:
        return list(self._collections.keys())

    def count(self, collection: Optional[str] = None) -> int:
        with self._lock:
            if collection is not None:
                return len(self._records(collection))
            return sum(len(r) for r in self._collections.values())

    def list_records(self, collection: str) -> list[dict[str, Any]]:
        """All records of a collection, in insertion order (copies)."""
        with self._lock:
            return [dict(r) for r in self._records(collection)]

    def get(self, collection: str, record_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            for record in self._records(collection):
                if record["id"] == record_id:
                    return dict(record)
        return None

    def create(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """Validate and append a record; an ``id`` is generated when absent.

        Raises:
            ValueError: Unknown collection, or the id is already taken
            pydantic.ValidationError: Invalid record data
        """
        model = COLLECTION_MODELS.get(collection)
        if model is None:
            raise ValueError(
                f"Unknown collection '{collection}'. Available: {self.list_collections()}"
            )
        payload = {**data, "id": data.get("id") or uuid.uuid4().hex[:12]}
        record = model.model_validate(payload).model_dump()

        with self._lock:
            records = self._records(collection)
            if any(r["id"] == record["id"] for r in records):
                raise ValueError(f"Record '{record['id']}' already exists in {collection}")
            records.append(record)

        logger.info(f"Created {collection} record: {record['id']}")
        return dict(record)

    def update(self, collection: str, record_id: str, changes: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Merge ``changes`` into a record and re-validate it.

        The id cannot be changed. Returns None when the record is missing.
        """
        model = COLLECTION_MODELS.get(collection)
        with self._lock:
            records = self._records(collection)
            for index, record in enumerate(records):
                if record["id"] == record_id:
                    merged = {**record, **changes, "id": record_id}
                    records[index] = model.model_validate(merged).model_dump()
                    logger.info(f"Updated {collection} record: {record_id}")
                    return dict(records[index])
        return None

    def delete(self, collection: str, record_id: str) -> bool:
        with self._lock:
            records = self._records(collection)
            for index, record in enumerate(records):
                if record["id"] == record_id:
                    del records[index]
                    logger.info(f"Deleted {collection} record: {record_id}")
                    return True
        return False


# Global store instance
_store: Optional[RecordStore] = None


def get_record_store() -> RecordStore:
    """Get the global record store instance."""
    global _store
    if _store is None:
        _store = RecordStore()
    return _store


def reset_record_store(seed_file: Optional[Path] = None) -> RecordStore:
    """Replace the global store with a freshly seeded one."""
    global _store
    _store = RecordStore(seed_file=seed_file)
    return _store
