"""Atomic file writes.

Content is written to a temporary file in the destination directory and
moved into place with ``os.replace``, so readers never see a partial file.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, BinaryIO


def _atomic_replace(path: Path, write) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as tmp:
            write(tmp)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def atomic_write_text(path: Path, text: str) -> None:
    _atomic_replace(Path(path), lambda f: f.write(text.encode("utf-8")))


def atomic_write_json(path: Path, data: Any) -> None:
    atomic_write_text(path, json.dumps(data, ensure_ascii=False, indent=2))


def atomic_write_stream(path: Path, source: BinaryIO) -> None:
    """Copy a binary stream (e.g. an upload) to ``path``."""
    _atomic_replace(Path(path), lambda f: shutil.copyfileobj(source, f))
