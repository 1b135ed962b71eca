"""Lesson page rendering.

Renders a lesson into a standalone HTML page and keeps a copy under
``public/lessons/<id>.html``.
"""

import logging
from pathlib import Path
from typing import List, Optional

import jinja2

from config import LESSON_PAGES_DIR, TEMPLATE_DIR
from core.exceptions import StorageError
from schemas.course import Lesson
from utils.file_utils import atomic_write_text

logger = logging.getLogger(__name__)

LESSON_TEMPLATE = "lesson.html"


class LessonPageRenderer:
    """Assembles lesson pages from the lesson template."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR, output_dir: Path = LESSON_PAGES_DIR):
        """Initialize LessonPageRenderer.

        Args:
            template_dir: Directory holding lesson.html.
            output_dir: Where rendered pages are written.
        """
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=jinja2.select_autoescape(["html"]),
        )
        self.output_dir = Path(output_dir)

    def render(self, lesson: Lesson) -> str:
        content = lesson.content
        return self.env.get_template(LESSON_TEMPLATE).render(
            title=lesson.title,
            description=lesson.description,
            handout=content.handout or None,
            videos=_or_none(content.videos),
            powerpoints=_or_none(content.powerpoints),
        )

    def publish(self, lesson: Lesson) -> str:
        """Render the lesson and write it to the pages directory.

        Returns:
            The rendered HTML.

        Raises:
            StorageError: If the page cannot be written.
        """
        html = self.render(lesson)
        path = self.output_dir / f"{lesson.id}.html"
        try:
            atomic_write_text(path, html)
        except OSError as e:
            logger.error("Failed to write lesson page %s: %s", path, e)
            raise StorageError("Failed to write lesson page.") from e
        logger.info("Rendered lesson page: %s", path)
        return html


def _or_none(items: List[str]) -> Optional[List[str]]:
    return list(items) if items else None
