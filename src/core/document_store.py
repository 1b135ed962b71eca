"""JSON document store.

All application state lives in one JSON file. Every mutation goes through
``DocumentStore.transaction()``, which holds a process-wide lock across
load, mutate and save, so concurrent requests in this process never
overwrite each other's changes.
"""

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError as PydanticValidationError

from config import DATABASE_PATH
from core.exceptions import StorageError
from core.identifiers import coerce_id
from schemas.document import COLLECTIONS, Document
from utils.file_utils import atomic_write_text

logger = logging.getLogger(__name__)

# Keys holding references to other records, normalized by migrate()
_ID_KEYS = ("id", "courseId", "lessonId", "assessmentId", "userId")
_OPENED_KEYS = ("openedLessons", "openedAssessments")


class DocumentStore:
    """Reads and replaces the persisted document as a whole."""

    def __init__(self, path: Path = DATABASE_PATH):
        """Initialize DocumentStore.

        Args:
            path: Location of the JSON document file.
        """
        self.path = Path(path)
        self._lock = threading.RLock()

    def load(self) -> Document:
        """Load the document, creating the default one on first use.

        Returns:
            The current Document.

        Raises:
            StorageError: If the file cannot be read or parsed.
        """
        with self._lock:
            if not self.path.exists():
                document = Document()
                self.save(document)
                logger.info("Initialized empty document store at %s", self.path)
                return document
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                return Document.model_validate(data)
            except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
                logger.error("Failed to load document %s: %s", self.path, e)
                raise StorageError("Failed to read data store.") from e

    def save(self, document: Document) -> None:
        """Replace the persisted document.

        Raises:
            StorageError: If the file cannot be written.
        """
        payload = json.dumps(document.model_dump(), ensure_ascii=False, indent=2)
        with self._lock:
            try:
                atomic_write_text(self.path, payload)
            except OSError as e:
                logger.error("Failed to save document %s: %s", self.path, e)
                raise StorageError("Failed to write data store.") from e

    @contextmanager
    def transaction(self) -> Iterator[Document]:
        """Load the document, yield it for mutation, then save it.

        Nothing is saved when the block raises.
        """
        with self._lock:
            document = self.load()
            yield document
            self.save(document)

    def migrate(self) -> Document:
        """Bring a stored document up to the current schema.

        Adds missing collections, turns ids into strings and removes
        duplicate entries from opened-item lists.
        """
        with self.transaction() as document:
            for name in COLLECTIONS:
                for record in document.get_collection(name):
                    _normalize_record(record)
        logger.info("Document store migrated: %s", self.path)
        return document


def _normalize_record(record: dict) -> None:
    for key in _ID_KEYS:
        if key in record and record[key] is not None:
            record[key] = coerce_id(record[key])
    for key in _OPENED_KEYS:
        if isinstance(record.get(key), list):
            unique = []
            for item in record[key]:
                item_id = coerce_id(item)
                if item_id is not None and item_id not in unique:
                    unique.append(item_id)
            record[key] = unique
    for question in record.get("questions") or []:
        if isinstance(question, dict) and "id" in question:
            question["id"] = coerce_id(question["id"])
