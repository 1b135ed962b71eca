"""Upload storage layout.

Uploaded files live under one root directory, split into kind-specific
subdirectories. Clients address them with ``/uploads/...`` URLs.
"""

import logging
import time
from pathlib import Path
from typing import BinaryIO, Optional

from config import UPLOADS_DIR, UPLOADS_URL_PREFIX
from core.exceptions import StorageError
from utils.file_utils import atomic_write_json, atomic_write_stream

logger = logging.getLogger(__name__)


class UploadStorage:
    """Resolves and writes files in the uploads tree."""

    def __init__(self, root: Path = UPLOADS_DIR):
        """Initialize UploadStorage.

        Args:
            root: Root directory of the uploads tree.
        """
        self.root = Path(root)
        self.courses_dir = self.root / "courses"
        self.lessons_dir = self.root / "lessons"
        self.handouts_dir = self.lessons_dir / "handouts"
        self.powerpoints_dir = self.lessons_dir / "powerpoints"
        self.videos_dir = self.lessons_dir / "videos"
        self.assessments_dir = self.root / "assessments"

    def ensure_dirs(self) -> None:
        for directory in (
            self.root,
            self.courses_dir,
            self.lessons_dir,
            self.handouts_dir,
            self.powerpoints_dir,
            self.videos_dir,
            self.assessments_dir,
        ):
            directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def unique_name(original_name: str) -> str:
        """Build a ``<timestamp-ms>-<name>`` file name from an upload name."""
        base = Path(original_name or "upload").name or "upload"
        return f"{int(time.time() * 1000)}-{base}"

    def public_url(self, path: Path) -> str:
        relative = Path(path).relative_to(self.root).as_posix()
        return f"{UPLOADS_URL_PREFIX}/{relative}"

    def resolve_url(self, url: str) -> Optional[Path]:
        """Map a ``/uploads/...`` URL back to a path inside the root.

        Returns None for URLs outside the uploads tree.
        """
        prefix = UPLOADS_URL_PREFIX + "/"
        if not url or not url.startswith(prefix):
            return None
        candidate = (self.root / url[len(prefix):]).resolve()
        if self.root.resolve() not in candidate.parents:
            return None
        return candidate

    def save_stream(self, directory: Path, original_name: str, source: BinaryIO) -> Path:
        """Store an uploaded stream under a collision-resistant name."""
        target = Path(directory) / self.unique_name(original_name)
        try:
            atomic_write_stream(target, source)
        except OSError as e:
            logger.error("Failed to store upload %s: %s", original_name, e)
            raise StorageError("Failed to store uploaded file.") from e
        return target

    def write_json(self, path: Path, data) -> None:
        try:
            atomic_write_json(path, data)
        except OSError as e:
            logger.error("Failed to write %s: %s", path, e)
            raise StorageError("Failed to write file.") from e

    def remove_url(self, url: Optional[str]) -> bool:
        """Delete the file behind an uploads URL if it exists."""
        path = self.resolve_url(url) if url else None
        if path is None or not path.is_file():
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.error("Failed to delete %s: %s", path, e)
            raise StorageError("Failed to delete file.") from e
        logger.info("Deleted upload: %s", path)
        return True
