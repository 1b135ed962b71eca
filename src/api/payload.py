"""Request body helpers for endpoints that accept JSON or form posts."""

import json
from typing import Any, Dict, List, Tuple

from fastapi import Request
from starlette.datastructures import UploadFile

from core.exceptions import ValidationError

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def read_payload(request: Request) -> Tuple[Dict[str, Any], Dict[str, List[UploadFile]]]:
    """Read the request body as fields plus uploaded files.

    Form posts give string fields and any attached files, keyed by field
    name without a trailing ``[]``. JSON posts give the decoded object and
    no files. An empty body is an empty payload.

    Raises:
        ValidationError: If the body is not valid JSON or not an object.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        fields: Dict[str, Any] = {}
        files: Dict[str, List[UploadFile]] = {}
        for key, value in form.multi_items():
            name = key[:-2] if key.endswith("[]") else key
            if isinstance(value, UploadFile):
                if value.filename:
                    files.setdefault(name, []).append(value)
            else:
                fields[name] = value
        return fields, files

    raw = await request.body()
    if not raw.strip():
        return {}, {}
    try:
        body = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError("Invalid JSON body.") from e
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")
    return body, {}
