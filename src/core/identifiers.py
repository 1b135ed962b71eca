"""Record id generation and normalization."""

import threading
import time
from typing import Any, Optional

_lock = threading.Lock()
_last_id = 0


def generate_id() -> str:
    """Return a new record id derived from the current time in milliseconds.

    Ids are strictly increasing within the process, so two records created
    in the same millisecond still get distinct ids.
    """
    global _last_id
    with _lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
        return str(candidate)


def coerce_id(value: Any) -> Optional[str]:
    """Normalize an incoming id to its canonical string form.

    Integers and integral floats become their decimal string, strings are
    stripped, empty values become None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def ids_equal(left: Any, right: Any) -> bool:
    """Compare two ids after normalization."""
    left_id = coerce_id(left)
    return left_id is not None and left_id == coerce_id(right)
