"""Classification of uploaded lesson files.

Files are sorted into handouts, slide decks and videos by extension and
stored in the matching directory. Anything else is kept in the lessons
root but not attached to the lesson.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Tuple

from config import HANDOUT_EXTENSIONS, POWERPOINT_EXTENSIONS, VIDEO_EXTENSIONS
from schemas.course import LessonContent
from utils.storage import UploadStorage

logger = logging.getLogger(__name__)


class ContentKind(str, Enum):
    HANDOUT = "handout"
    POWERPOINT = "powerpoint"
    VIDEO = "video"


@dataclass
class UploadedFile:
    """A file received in a request: its client-side name and its data."""

    filename: str
    stream: BinaryIO


def classify(filename: str) -> Optional[ContentKind]:
    """Return the content kind for a file name, or None if unrecognized."""
    ext = Path(filename or "").suffix.lower()
    if ext in HANDOUT_EXTENSIONS:
        return ContentKind.HANDOUT
    if ext in POWERPOINT_EXTENSIONS:
        return ContentKind.POWERPOINT
    if ext in VIDEO_EXTENSIONS:
        return ContentKind.VIDEO
    return None


class ContentRouter:
    """Stores lesson uploads and builds the lesson's content bundle."""

    def __init__(self, storage: UploadStorage):
        self.storage = storage

    def directory_for(self, filename: str) -> Path:
        """Storage directory for a file name; the lessons root if unrecognized."""
        return self._directory_for(classify(filename))

    def _directory_for(self, kind: Optional[ContentKind]) -> Path:
        if kind is ContentKind.HANDOUT:
            return self.storage.handouts_dir
        if kind is ContentKind.POWERPOINT:
            return self.storage.powerpoints_dir
        if kind is ContentKind.VIDEO:
            return self.storage.videos_dir
        return self.storage.lessons_dir

    def route(self, files: Iterable[UploadedFile]) -> Tuple[LessonContent, int]:
        """Store every file and collect the URLs of the recognized ones.

        Only the first handout is attached; videos and slide decks are
        unlimited.

        Returns:
            The content bundle and the number of files that were attached.
        """
        handouts, powerpoints, videos = [], [], []
        for upload in files:
            kind = classify(upload.filename)
            stored = self.storage.save_stream(
                self._directory_for(kind), upload.filename, upload.stream
            )
            if kind is None:
                logger.warning("Unrecognized file type: %s", upload.filename)
                continue
            url = self.storage.public_url(stored)
            if kind is ContentKind.HANDOUT:
                handouts.append(url)
            elif kind is ContentKind.POWERPOINT:
                powerpoints.append(url)
            else:
                videos.append(url)

        content = LessonContent(
            handout=handouts[0] if handouts else None,
            videos=videos,
            powerpoints=powerpoints,
        )
        return content, len(handouts) + len(powerpoints) + len(videos)
