"""Shared schema building blocks.

Records are persisted and sent over the wire with camelCase keys, while
Python code uses snake_case attribute names.
"""

from datetime import datetime
from typing import Annotated, Optional

import pytz
from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from core.identifiers import coerce_id

# Ids are canonical strings; numbers on the wire are converted on ingress.
Identifier = Annotated[str, BeforeValidator(coerce_id)]
OptionalIdentifier = Annotated[Optional[str], BeforeValidator(coerce_id)]


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(pytz.utc).isoformat()


class CamelModel(BaseModel):
    """Base model for request bodies using camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordModel(CamelModel):
    """Base model for stored records.

    Unknown keys are kept, so fields merged in through the generic
    collection endpoints survive a round trip through the typed model.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    def to_record(self) -> dict:
        """Serialize to the persisted (camelCase) dictionary form."""
        return self.model_dump(by_alias=True, mode="json")
