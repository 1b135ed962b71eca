"""Generic collection routes.

Registered last, so the dedicated routes for a collection take precedence.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body

from core.dependencies import CollectionManagerDep
from schemas.document import Record

router = APIRouter(prefix="/api", tags=["Collections"])


@router.get("/{collection}", summary="List a collection")
def list_records(collection: str, collection_manager: CollectionManagerDep) -> List[Record]:
    return collection_manager.list_records(collection)


@router.post("/{collection}", summary="Create a record")
def create_record(
    collection: str,
    collection_manager: CollectionManagerDep,
    fields: Optional[Dict[str, Any]] = Body(None),
) -> Record:
    return collection_manager.create_record(collection, fields or {})


@router.put("/{collection}/{record_id}", summary="Update a record")
def update_record(
    collection: str,
    record_id: str,
    collection_manager: CollectionManagerDep,
    fields: Optional[Dict[str, Any]] = Body(None),
) -> Record:
    return collection_manager.update_record(collection, record_id, fields or {})


@router.delete("/{collection}/{record_id}", summary="Delete a record")
def delete_record(
    collection: str, record_id: str, collection_manager: CollectionManagerDep
) -> dict:
    """Delete every record with the id; succeeds even when none matched."""
    removed = collection_manager.delete_record(collection, record_id)
    return {
        "success": True,
        "message": f"{collection} deleted successfully",
        "deleted": removed,
    }
