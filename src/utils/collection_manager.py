"""Generic collection CRUD.

Operates on any collection of the document by name. Records are free-form
dictionaries; the only field the accessor owns is ``id``.
"""

import logging
from typing import Any, Dict, List

from core.document_store import DocumentStore
from core.exceptions import NotFoundError
from core.identifiers import coerce_id, generate_id, ids_equal
from schemas.document import GENERIC_COLLECTIONS, Record

logger = logging.getLogger(__name__)


class CollectionManager:
    """Manages generic collection operations on the document store."""

    def __init__(self, store: DocumentStore):
        """Initialize CollectionManager.

        Args:
            store: The document store.
        """
        self.store = store

    def _check_writable(self, name: str) -> None:
        if name not in GENERIC_COLLECTIONS:
            raise NotFoundError(f"Unknown collection: {name}")

    def list_records(self, name: str) -> List[Record]:
        """Return every record of a collection (empty for unknown names)."""
        return self.store.load().get_collection(name)

    def create_record(self, name: str, fields: Dict[str, Any]) -> Record:
        """Append a new record with a fresh id.

        Raises:
            NotFoundError: If the collection is not generically writable.
        """
        self._check_writable(name)
        record = {**fields, "id": generate_id()}
        with self.store.transaction() as document:
            document.get_collection(name).append(record)
        logger.info("Created %s record %s", name, record["id"])
        return record

    def update_record(self, name: str, record_id: Any, fields: Dict[str, Any]) -> Record:
        """Shallow-merge fields into the first record with a matching id.

        Raises:
            NotFoundError: If no record matches.
        """
        self._check_writable(name)
        with self.store.transaction() as document:
            records = document.get_collection(name)
            for index, record in enumerate(records):
                if ids_equal(record.get("id"), record_id):
                    updated = {**record, **fields, "id": coerce_id(record.get("id"))}
                    records[index] = updated
                    break
            else:
                raise NotFoundError(f"{name} not found")
        logger.info("Updated %s record %s", name, record_id)
        return updated

    def delete_record(self, name: str, record_id: Any) -> int:
        """Remove every record with a matching id.

        Returns:
            Number of removed records (normally 0 or 1).
        """
        self._check_writable(name)
        with self.store.transaction() as document:
            records = document.get_collection(name)
            kept = [r for r in records if not ids_equal(r.get("id"), record_id)]
            document.set_collection(name, kept)
        removed = len(records) - len(kept)
        logger.info("Deleted %d %s record(s) with id %s", removed, name, record_id)
        return removed
