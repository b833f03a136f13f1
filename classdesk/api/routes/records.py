"""API routes for school records.

CRUD over the in-memory record store. Table views read the same
collections, so a delete here shrinks the next projection of the table.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException
from pydantic import ValidationError

from classdesk.records.store import get_record_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/records", tags=["records"])


def _check_collection(collection: str) -> None:
    store = get_record_store()
    if collection not in store.list_collections():
        raise HTTPException(
            status_code=404,
            detail=f"Collection '{collection}' not found. Available: {store.list_collections()}",
        )


def _invalid(collection: str, e: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={
            "error": f"Invalid {collection} record",
            "errors": e.errors(include_url=False, include_context=False),
        },
    )


@router.get("")
async def list_collections():
    """List collections with their record counts."""
    store = get_record_store()
    return {name: store.count(name) for name in store.list_collections()}


@router.get("/{collection}")
async def list_records(collection: str) -> list[dict[str, Any]]:
    """All records of a collection, in insertion order."""
    _check_collection(collection)
    return get_record_store().list_records(collection)


@router.get("/{collection}/{record_id}")
async def get_record(collection: str, record_id: str) -> dict[str, Any]:
    _check_collection(collection)
    record = get_record_store().get(collection, record_id)
    if record is None:
        raise HTTPException(
            status_code=404,
            detail=f"Record '{record_id}' not found in {collection}",
        )
    return record


@router.post("/{collection}", status_code=201)
async def create_record(collection: str, data: dict[str, Any] = Body(...)) -> dict[str, Any]:
    _check_collection(collection)
    try:
        return get_record_store().create(collection, data)
    except ValidationError as e:
        raise _invalid(collection, e)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.patch("/{collection}/{record_id}")
async def update_record(
    collection: str,
    record_id: str,
    changes: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    _check_collection(collection)
    try:
        record = get_record_store().update(collection, record_id, changes)
    except ValidationError as e:
        raise _invalid(collection, e)
    if record is None:
        raise HTTPException(
            status_code=404,
            detail=f"Record '{record_id}' not found in {collection}",
        )
    return record


@router.delete("/{collection}/{record_id}")
async def delete_record(collection: str, record_id: str):
    _check_collection(collection)
    if not get_record_store().delete(collection, record_id):
        raise HTTPException(
            status_code=404,
            detail=f"Record '{record_id}' not found in {collection}",
        )
    logger.info(f"Deleted record via API: {collection}/{record_id}")
    return {"deleted": record_id, "collection": collection}
